"""
Resilience Module

Circuit breaker and fallback store protecting the market data source.
"""

from .circuit_breaker import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_HALF_OPEN_MAX_CALLS,
    DEFAULT_RECOVERY_TIMEOUT_S,
    BreakerStats,
    CircuitBreaker,
    CircuitState,
)
from .fallback import DEFAULT_PRICES, FallbackResult, FallbackStore, display_name
from .gate import GateStats, ResilienceGate, get_gate, set_gate

__all__ = [
    "DEFAULT_FAILURE_THRESHOLD",
    "DEFAULT_HALF_OPEN_MAX_CALLS",
    "DEFAULT_RECOVERY_TIMEOUT_S",
    "BreakerStats",
    "CircuitBreaker",
    "CircuitState",
    "DEFAULT_PRICES",
    "FallbackResult",
    "FallbackStore",
    "display_name",
    "GateStats",
    "ResilienceGate",
    "get_gate",
    "set_gate",
]
