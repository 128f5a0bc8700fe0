"""
Clock

Time source shared by the pipeline, the resilience gate and the metrics
collector. Wall-clock time is used for timestamps shown to users;
monotonic time is used for every elapsed-time and recovery-window
computation.

FrozenClock lets tests move time forward explicitly instead of sleeping.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """
    Protocol for time source.

    Can be real time or frozen for deterministic testing.
    """

    def now(self) -> datetime:
        """Get current UTC time."""
        ...

    def monotonic(self) -> float:
        """Get a monotonic reading in seconds."""
        ...


class RealClock:
    """Real-time clock implementation."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """
    Frozen clock for deterministic testing.

    Both readings stay fixed until advance() or set_time() is called.
    """

    def __init__(self, frozen_time: Optional[datetime] = None) -> None:
        self._time = frozen_time or datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        self._monotonic = 1000.0

    def now(self) -> datetime:
        return self._time

    def monotonic(self) -> float:
        return self._monotonic

    def set_time(self, time: datetime) -> None:
        """Set the frozen wall time."""
        self._time = time

    def advance(self, seconds: float) -> None:
        """Move both readings forward."""
        self._time = self._time + timedelta(seconds=seconds)
        self._monotonic += seconds


def elapsed_ms(clock: Clock, since: float) -> float:
    """Milliseconds elapsed on the clock's monotonic reading since `since`."""
    return max(0.0, (clock.monotonic() - since) * 1000.0)
