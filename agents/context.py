"""
Run Context

Single-run state threaded through every agent of a pipeline run:

- the ticker being analyzed
- the market snapshot acquired before the first agent runs
- results of the agents that already ran, in execution order
- a side-channel for auxiliary values (data source, operation id, ...)
- a monotonic start reading

Results are append-only. Agents read earlier results through `results` or
`get_result`; only the pipeline records new ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, TYPE_CHECKING

from core.clock import Clock, FrozenClock, RealClock, elapsed_ms

if TYPE_CHECKING:
    from core.schemas.analysis import StepResult
    from core.schemas.market import HistoricalSeries, MarketSnapshot


@dataclass
class RunContext:
    """
    Mutable state for one pipeline run.

    Usage:
        ctx = RunContext.create("BTC", snapshot)
        ctx.add_result("ANALYST", analyst_report)

        report = ctx.get_result("ANALYST")
    """

    ticker: str
    _market_data: "MarketSnapshot" = field(repr=False)
    historical_data: Optional["HistoricalSeries"] = None
    run_id: Optional[str] = None
    clock: Clock = field(default_factory=RealClock)
    started_at: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict)
    _results: dict[str, "StepResult"] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self.started_at:
            self.started_at = self.clock.monotonic()

    @classmethod
    def create(
        cls,
        ticker: str,
        market_data: "MarketSnapshot",
        *,
        historical_data: Optional["HistoricalSeries"] = None,
        run_id: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> "RunContext":
        """Create a context with a fresh start reading."""
        return cls(
            ticker=ticker,
            _market_data=market_data,
            historical_data=historical_data,
            run_id=run_id,
            clock=clock or RealClock(),
        )

    @property
    def market_data(self) -> "MarketSnapshot":
        """Snapshot acquired before the first agent ran; fixed for the run."""
        return self._market_data

    @property
    def results(self) -> Mapping[str, "StepResult"]:
        """Read-only view of recorded results, in execution order."""
        return MappingProxyType(self._results)

    def add_result(self, agent_name: str, result: "StepResult") -> None:
        """
        Record an agent's result.

        Raises:
            ValueError: If a result for this agent was already recorded
        """
        if agent_name in self._results:
            raise ValueError(f"Result for agent {agent_name} already recorded")
        self._results[agent_name] = result

    def get_result(self, agent_name: str) -> Optional["StepResult"]:
        return self._results.get(agent_name)

    def has_result(self, agent_name: str) -> bool:
        return agent_name in self._results

    def put(self, key: str, value: Any) -> None:
        """Store an auxiliary value."""
        self.extra[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.extra.get(key, default)

    def elapsed_ms(self) -> float:
        """Milliseconds since the run started."""
        return elapsed_ms(self.clock, self.started_at)


__all__ = [
    "Clock",
    "FrozenClock",
    "RealClock",
    "RunContext",
]
