"""
Agent Base Classes

Defines the agent interface and base implementation.

Every agent in the pipeline must:
1. Have a unique name and an integer priority (lower runs first)
2. Say whether it can run against a given RunContext
3. Return a StepResult from `run`, or raise AgentAnalysisException for
   an expected business failure

Anything else an agent raises is treated by the pipeline as a fault and
aborts the run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Protocol, TYPE_CHECKING, runtime_checkable

from core.clock import elapsed_ms
from core.schemas.analysis import AnalysisStatus, StepResult
from core.schemas.errors import AgentAnalysisException

if TYPE_CHECKING:
    from .context import RunContext


class AgentStep(str, Enum):
    """
    Pipeline steps fulfilled by the built-in agents.
    """
    ANALYST = "ANALYST"
    RISK_MANAGER = "RISK_MANAGER"
    TRADER = "TRADER"


@runtime_checkable
class Agent(Protocol):
    """
    Protocol defining the agent interface.

    All agents must implement this protocol.
    """

    @property
    def name(self) -> str:
        """Unique name identifying this agent."""
        ...

    @property
    def priority(self) -> int:
        """Execution order; lower runs first."""
        ...

    def can_run(self, ctx: "RunContext") -> bool:
        """Whether the agent has what it needs in the context."""
        ...

    def run(self, ctx: "RunContext") -> Optional[StepResult]:
        """
        Analyze the context.

        Raises:
            AgentAnalysisException: Declared, expected failure
        """
        ...


class BaseAgent(ABC):
    """
    Abstract base class for agents.

    `run` validates the context, delegates to `analyze` and stamps the
    result with the agent name, ticker, processing time and COMPLETED
    status. Subclasses declare the results they depend on in `_requires`.
    """

    # Subclasses must define these
    _name: str
    _version: str = "v1"
    _priority: int = 100
    _requires: tuple[str, ...] = ()

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        priority: Optional[int] = None,
    ) -> None:
        self._name_override = name
        self._priority_override = priority

    @property
    def name(self) -> str:
        """Agent name."""
        return self._name_override or getattr(self, "_name", self.__class__.__name__)

    @property
    def version(self) -> str:
        return self._version

    @property
    def priority(self) -> int:
        return self._priority if self._priority_override is None else self._priority_override

    @property
    def requires(self) -> tuple[str, ...]:
        return self._requires

    def can_run(self, ctx: "RunContext") -> bool:
        if not ctx.ticker or not ctx.ticker.strip():
            return False
        if ctx.market_data is None:
            return False
        return all(ctx.has_result(name) for name in self._requires)

    def run(self, ctx: "RunContext") -> Optional[StepResult]:
        if not self.can_run(ctx):
            raise AgentAnalysisException(
                self.name, ctx.ticker, f"Agent {self.name} cannot analyze ticker: {ctx.ticker}"
            )

        started = ctx.clock.monotonic()
        result = self.analyze(ctx)
        if result is None:
            return None

        return result.model_copy(
            update={
                "agent_name": self.name,
                "ticker": ctx.ticker,
                "processing_time_ms": elapsed_ms(ctx.clock, started),
                "status": AnalysisStatus.COMPLETED,
            }
        )

    @abstractmethod
    def analyze(self, ctx: "RunContext") -> Optional[StepResult]:
        """Produce this agent's result for the context."""

    def _require_result(self, ctx: "RunContext", agent_name: str) -> StepResult:
        """Fetch a result this agent depends on, as a declared failure if missing."""
        result = ctx.get_result(agent_name)
        if result is None:
            raise AgentAnalysisException(
                self.name, ctx.ticker, f"Missing {agent_name} result for {ctx.ticker}"
            )
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"


# Type alias for agent factory functions
AgentFactory = Callable[[], Agent]
