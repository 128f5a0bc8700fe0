"""
Resilience Gate

Process-wide guard in front of the market data source: a circuit breaker
deciding whether live calls may go through, plus a fallback store that
answers when they may not.

The gate never raises and never logs. Callers decide what a refusal means
and subscribe to transitions through `on_transition`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from core.clock import Clock, RealClock
from core.schemas.market import MarketSnapshot

from .circuit_breaker import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_HALF_OPEN_MAX_CALLS,
    DEFAULT_RECOVERY_TIMEOUT_S,
    CircuitBreaker,
    CircuitState,
    TransitionListener,
)
from .fallback import FallbackResult, FallbackStore


@dataclass(frozen=True)
class GateStats:
    """Point-in-time view of the gate for reporting."""
    circuit_state: CircuitState
    failure_count: int
    emergency_cache_size: int
    last_failure_time: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        return {
            "circuit_state": self.circuit_state.value,
            "failure_count": self.failure_count,
            "emergency_cache_size": self.emergency_cache_size,
            "last_failure_time": (
                self.last_failure_time.isoformat() if self.last_failure_time else None
            ),
        }


class ResilienceGate:
    """
    Circuit breaker plus fallback store behind one interface.

    Usage:
        gate = ResilienceGate()

        if gate.is_call_allowed():
            try:
                snapshot = provider.fetch_market_data(ticker)
                gate.record_success(ticker, snapshot)
            except SourceUnavailableException:
                gate.record_failure()
                fallback = gate.fallback(ticker)
    """

    def __init__(
        self,
        *,
        breaker: Optional[CircuitBreaker] = None,
        store: Optional[FallbackStore] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock = clock or RealClock()
        self.breaker = breaker or CircuitBreaker(clock=self._clock)
        self.store = store or FallbackStore(clock=self._clock)

    @classmethod
    def create(
        cls,
        *,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        recovery_timeout_s: float = DEFAULT_RECOVERY_TIMEOUT_S,
        half_open_max_calls: int = DEFAULT_HALF_OPEN_MAX_CALLS,
        defaults: Optional[dict[str, float]] = None,
        clock: Optional[Clock] = None,
    ) -> "ResilienceGate":
        """Build a gate with explicit breaker settings."""
        clock = clock or RealClock()
        breaker = CircuitBreaker(
            failure_threshold=failure_threshold,
            recovery_timeout_s=recovery_timeout_s,
            half_open_max_calls=half_open_max_calls,
            clock=clock,
        )
        return cls(
            breaker=breaker,
            store=FallbackStore(defaults=defaults, clock=clock),
            clock=clock,
        )

    def on_transition(self, listener: Optional[TransitionListener]) -> None:
        """Subscribe to breaker state changes."""
        self.breaker.set_listener(listener)

    @property
    def state(self) -> CircuitState:
        return self.breaker.state

    def is_call_allowed(self) -> bool:
        return self.breaker.is_call_allowed()

    def record_success(
        self,
        ticker: Optional[str] = None,
        snapshot: Optional[MarketSnapshot] = None,
    ) -> None:
        """Record a successful live call, feeding the emergency cache when data is given."""
        self.breaker.record_success()
        if ticker and snapshot is not None:
            self.store.store(ticker, snapshot)

    def record_failure(self) -> None:
        self.breaker.record_failure()

    def fallback(self, ticker: str) -> Optional[FallbackResult]:
        """Emergency cache, then defaults table, then nothing."""
        return self.store.lookup(ticker)

    def stats(self) -> GateStats:
        breaker_stats = self.breaker.stats()
        last_failure: Optional[datetime] = None
        if breaker_stats.last_failure_time is not None:
            # Convert the monotonic stamp to wall time for display
            age_s = self._clock.monotonic() - breaker_stats.last_failure_time
            last_failure = self._clock.now() - timedelta(seconds=age_s)
        return GateStats(
            circuit_state=breaker_stats.state,
            failure_count=breaker_stats.failure_count,
            emergency_cache_size=self.store.size,
            last_failure_time=last_failure,
        )

    def reset(self) -> None:
        """Administrative reset: close the circuit and drop cached data."""
        self.breaker.reset()
        self.store.clear()


# Global gate instance
_global_gate: Optional[ResilienceGate] = None


def get_gate() -> ResilienceGate:
    """Get the process-wide resilience gate."""
    global _global_gate
    if _global_gate is None:
        from core.config import get_default_config

        resilience = get_default_config().resilience
        _global_gate = ResilienceGate.create(
            failure_threshold=resilience.failure_threshold,
            recovery_timeout_s=resilience.recovery_timeout_s,
            half_open_max_calls=resilience.half_open_max_calls,
        )
    return _global_gate


def set_gate(gate: Optional[ResilienceGate]) -> None:
    """Replace the process-wide gate (None forces a rebuild on next use)."""
    global _global_gate
    _global_gate = gate
