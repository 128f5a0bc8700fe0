"""
Common test fixtures shared by all modules.

Provides factory functions for the core data structures:
- MarketSnapshot / HistoricalSeries
- RunContext
- AgentRegistry populated with scripted agents

and a set of scripted agents that succeed, skip, fail or crash on demand.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from agents.base import BaseAgent
from agents.context import RunContext
from agents.registry import AgentRegistry
from core.clock import Clock, FrozenClock
from core.schemas.analysis import StepResult
from core.schemas.errors import AgentAnalysisException
from core.schemas.market import HistoricalSeries, MarketSnapshot, PricePoint


# =============================================================================
# Market Data Factories
# =============================================================================

def make_snapshot(
    ticker: str = "BTC",
    price: float = 55000.0,
    **kwargs,
) -> MarketSnapshot:
    """Create a MarketSnapshot with sensible defaults."""
    return MarketSnapshot(
        ticker=ticker,
        name=kwargs.pop("name", ticker),
        current_price=price,
        **kwargs,
    )


def make_history(
    ticker: str = "BTC",
    prices: tuple[float, ...] = (50000.0, 52000.0, 55000.0),
    days: int = 30,
) -> HistoricalSeries:
    """Create a daily HistoricalSeries ending on 2026-01-01."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc) - timedelta(days=len(prices) - 1)
    points = tuple(
        PricePoint(timestamp=start + timedelta(days=i), price=p)
        for i, p in enumerate(prices)
    )
    return HistoricalSeries(ticker=ticker, days=days, points=points)


# =============================================================================
# RunContext Factory
# =============================================================================

def make_context(
    ticker: str = "BTC",
    price: float = 55000.0,
    *,
    historical_data: Optional[HistoricalSeries] = None,
    results: Optional[dict[str, StepResult]] = None,
    clock: Optional[Clock] = None,
) -> RunContext:
    """Create a RunContext, optionally pre-populated with results."""
    ctx = RunContext.create(
        ticker,
        make_snapshot(ticker, price),
        historical_data=historical_data,
        run_id="test0001",
        clock=clock or FrozenClock(),
    )
    for name, result in (results or {}).items():
        ctx.add_result(name, result)
    return ctx


# =============================================================================
# Scripted Agents
# =============================================================================

class ScriptedAgent(BaseAgent):
    """
    Agent whose behavior is fixed at construction.

    behavior:
        "ok"      return a StepResult carrying `summary`
        "skip"    can_run() is False
        "fail"    raise AgentAnalysisException
        "crash"   raise RuntimeError
        "null"    return None
    """

    _version = "test"

    def __init__(
        self,
        name: str,
        priority: int,
        behavior: str = "ok",
        *,
        summary: str = "",
        seen: Optional[list[str]] = None,
        on_run: Optional[Callable[[RunContext], None]] = None,
    ) -> None:
        super().__init__(name=name, priority=priority)
        self.behavior = behavior
        self.summary = summary or f"{name} done"
        self.seen = seen
        self.on_run = on_run

    def can_run(self, ctx: RunContext) -> bool:
        if self.behavior == "skip":
            return False
        return super().can_run(ctx)

    def analyze(self, ctx: RunContext) -> Optional[StepResult]:
        if self.seen is not None:
            self.seen.append(self.name)
        if self.on_run is not None:
            self.on_run(ctx)

        if self.behavior == "fail":
            raise AgentAnalysisException(self.name, ctx.ticker, f"{self.name} rejected {ctx.ticker}")
        if self.behavior == "crash":
            raise RuntimeError(f"{self.name} blew up")
        if self.behavior == "null":
            return None
        return StepResult(result_summary=self.summary, confidence_score=0.5)


def make_registry(*agents: tuple, seen: Optional[list[str]] = None) -> AgentRegistry:
    """
    Build a registry of ScriptedAgents.

    Each entry is (name, priority) or (name, priority, behavior).
    """
    registry = AgentRegistry()
    for entry in agents:
        name, priority = entry[0], entry[1]
        behavior = entry[2] if len(entry) > 2 else "ok"
        registry.register(
            name,
            lambda n=name, p=priority, b=behavior: ScriptedAgent(n, p, b, seen=seen),
            priority=priority,
        )
    return registry


def make_builtin_registry() -> AgentRegistry:
    """A fresh registry with the three built-in agents."""
    from agents import AnalystAgent, RiskManagerAgent, TraderAgent

    registry = AgentRegistry()
    registry.register("ANALYST", AnalystAgent, metadata={"description": "analyst"})
    registry.register("RISK_MANAGER", RiskManagerAgent, metadata={"requires": ["ANALYST"]})
    registry.register("TRADER", TraderAgent, metadata={"requires": ["ANALYST", "RISK_MANAGER"]})
    return registry
