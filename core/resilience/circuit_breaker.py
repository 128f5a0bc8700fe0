"""
Circuit Breaker

Three-state guard around an unreliable upstream call.

    CLOSED     every call is allowed; failures are counted
    OPEN       calls are refused until the recovery window has passed
    HALF_OPEN  a small number of probe calls are let through

State lives behind a single lock so that concurrent runs never observe a
torn update. The breaker does not log: transitions are reported to an
optional listener, called after the lock is released.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Callable, Optional

from core.clock import Clock, RealClock


DEFAULT_FAILURE_THRESHOLD = 5
DEFAULT_RECOVERY_TIMEOUT_S = 60.0
DEFAULT_HALF_OPEN_MAX_CALLS = 3


class CircuitState(str, Enum):
    """Circuit breaker mode."""
    CLOSED = "CLOSED"        # passing
    OPEN = "OPEN"            # blocking
    HALF_OPEN = "HALF_OPEN"  # probing


TransitionListener = Callable[[CircuitState, CircuitState], None]


@dataclass(frozen=True)
class BreakerStats:
    """Consistent snapshot of the breaker's counters."""
    state: CircuitState
    failure_count: int
    half_open_calls: int
    last_failure_time: Optional[float]


class CircuitBreaker:
    """
    Thread-safe circuit breaker.

    Usage:
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout_s=60)

        if breaker.is_call_allowed():
            try:
                value = fetch()
                breaker.record_success()
            except Exception:
                breaker.record_failure()
    """

    def __init__(
        self,
        *,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        recovery_timeout_s: float = DEFAULT_RECOVERY_TIMEOUT_S,
        half_open_max_calls: int = DEFAULT_HALF_OPEN_MAX_CALLS,
        clock: Optional[Clock] = None,
        listener: Optional[TransitionListener] = None,
    ) -> None:
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Failures in CLOSED state before opening
            recovery_timeout_s: Seconds after the last failure before probing
            half_open_max_calls: Probe calls allowed per HALF_OPEN episode
            clock: Time source (monotonic reading is used)
            listener: Called with (old_state, new_state) on every transition
        """
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if recovery_timeout_s < 0:
            raise ValueError("recovery_timeout_s must not be negative")
        if half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be at least 1")

        self.failure_threshold = failure_threshold
        self.recovery_timeout_s = recovery_timeout_s
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock or RealClock()
        self._listener = listener

        self._lock = Lock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._half_open_calls = 0
        self._last_failure_time: Optional[float] = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    def stats(self) -> BreakerStats:
        with self._lock:
            return BreakerStats(
                state=self._state,
                failure_count=self._failure_count,
                half_open_calls=self._half_open_calls,
                last_failure_time=self._last_failure_time,
            )

    def set_listener(self, listener: Optional[TransitionListener]) -> None:
        """Replace the transition listener."""
        self._listener = listener

    # -------------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------------

    def is_call_allowed(self) -> bool:
        """
        Decide whether an upstream call may go through.

        In OPEN state this is also where the recovery window is checked,
        and in HALF_OPEN state every allowed call consumes probe budget.
        """
        with self._lock:
            old = self._state

            if self._state == CircuitState.CLOSED:
                return True

            if self._state == CircuitState.OPEN:
                now = self._clock.monotonic()
                last = self._last_failure_time if self._last_failure_time is not None else now
                if now - last > self.recovery_timeout_s:
                    # The transitioning call itself is not charged to the probe budget
                    self._state = CircuitState.HALF_OPEN
                    self._half_open_calls = 0
                    allowed = True
                else:
                    allowed = False
            else:
                self._half_open_calls += 1
                if self._half_open_calls <= self.half_open_max_calls:
                    allowed = True
                else:
                    self._state = CircuitState.OPEN
                    self._last_failure_time = self._clock.monotonic()
                    allowed = False

            new = self._state

        self._notify(old, new)
        return allowed

    def record_success(self) -> None:
        """Zero the failure counter; a success while probing closes the circuit."""
        with self._lock:
            old = self._state
            self._failure_count = 0
            if self._state == CircuitState.HALF_OPEN:
                self._state = CircuitState.CLOSED
                self._half_open_calls = 0
            new = self._state

        self._notify(old, new)

    def record_failure(self) -> None:
        """
        Stamp the failure time and count the failure.

        Only a CLOSED breaker opens here; OPEN and HALF_OPEN resolve their
        own transitions on the next is_call_allowed() check.
        """
        with self._lock:
            old = self._state
            self._last_failure_time = self._clock.monotonic()
            self._failure_count += 1
            if (
                self._state == CircuitState.CLOSED
                and self._failure_count >= self.failure_threshold
            ):
                self._state = CircuitState.OPEN
            new = self._state

        self._notify(old, new)

    def reset(self) -> None:
        """Administrative reset back to CLOSED with all counters cleared."""
        with self._lock:
            old = self._state
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._half_open_calls = 0
            self._last_failure_time = None

        self._notify(old, CircuitState.CLOSED)

    def _notify(self, old: CircuitState, new: CircuitState) -> None:
        if old != new and self._listener is not None:
            self._listener(old, new)
