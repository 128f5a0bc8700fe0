"""
Run Metrics

Process-wide counters observed by every pipeline run:

- runs started, succeeded and failed, and cumulative successful run time
- per-agent executions, failures and cumulative time
- the instant the counters were last reset

All counters sit behind one lock, so a reset can never interleave with a
half-applied update. Rates and averages are derived on read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.clock import Clock, RealClock


logger = logging.getLogger(__name__)


RESET_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Snapshot Models
# =============================================================================

class AgentMetrics(BaseModel):
    """Per-agent view of the counters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    execution_count: int = Field(..., ge=0)
    failure_count: int = Field(..., ge=0)
    failure_rate: float = Field(..., description="Failed executions in percent", ge=0.0)
    average_execution_time_ms: float = Field(..., ge=0.0)


class MetricsSnapshot(BaseModel):
    """Read-only copy of all counters for reporting."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_requests: int = Field(..., ge=0)
    successful_runs: int = Field(..., ge=0)
    failed_runs: int = Field(..., ge=0)
    success_rate: float = Field(..., description="Successful runs in percent")
    failure_rate: float = Field(..., description="Failed runs in percent")
    average_execution_time_ms: float = Field(..., description="Mean time of successful runs")
    agent_metrics: dict[str, AgentMetrics] = Field(default_factory=dict)
    uptime_ms: float = Field(..., ge=0.0)
    last_reset_time: str = Field(..., description="Reset instant, YYYY-MM-DD HH:MM:SS")


# =============================================================================
# Collector
# =============================================================================

@dataclass
class _AgentCounters:
    executions: int = 0
    failures: int = 0
    total_time_ms: float = 0.0


def _percent(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return part * 100.0 / whole


class RunMetrics:
    """
    Thread-safe metrics collector.

    Usage:
        metrics = RunMetrics()

        metrics.record_run_start("BTC")
        metrics.record_step_execution("ANALYST", 12.5, True)
        metrics.record_run_success("BTC", 40.0)

        metrics.success_rate()  # 100.0
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or RealClock()
        self._lock = Lock()
        self._zero()

    def _zero(self) -> None:
        """Reset every counter. Callers hold the lock (or own the object)."""
        self._total = 0
        self._successful = 0
        self._failed = 0
        self._total_time_ms = 0.0
        self._agents: dict[str, _AgentCounters] = {}
        self._reset_at = self._clock.now()
        self._reset_monotonic = self._clock.monotonic()

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def _requests(self) -> int:
        # A run started before reset() and finished after it completes without
        # a start in this window; completed runs never exceed requests.
        return max(self._total, self._successful + self._failed)

    def record_run_start(self, ticker: str) -> None:
        with self._lock:
            self._total += 1
            total = self._total
        logger.debug(f"Analysis started for ticker: {ticker} (total requests: {total})")

    def record_run_success(self, ticker: str, elapsed_ms: float) -> None:
        with self._lock:
            self._successful += 1
            self._total_time_ms += elapsed_ms
            rate = _percent(self._successful, self._requests())
        logger.info(
            f"Analysis completed successfully for ticker: {ticker} in {elapsed_ms:.0f}ms "
            f"(success rate: {rate:.2f}%)"
        )

    def record_run_failure(self, ticker: str, reason: str) -> None:
        with self._lock:
            self._failed += 1
            rate = _percent(self._failed, self._requests())
        logger.warning(
            f"Analysis failed for ticker: {ticker} - Error: {reason} (failure rate: {rate:.2f}%)"
        )

    def record_step_execution(self, agent_name: str, elapsed_ms: float, success: bool) -> None:
        with self._lock:
            counters = self._agents.setdefault(agent_name, _AgentCounters())
            counters.executions += 1
            counters.total_time_ms += elapsed_ms
            if not success:
                counters.failures += 1
        logger.debug(f"Agent {agent_name} executed in {elapsed_ms:.1f}ms (success: {success})")

    # -------------------------------------------------------------------------
    # Totals and rates
    # -------------------------------------------------------------------------

    def total_requests(self) -> int:
        with self._lock:
            return self._requests()

    def successful_runs(self) -> int:
        with self._lock:
            return self._successful

    def failed_runs(self) -> int:
        with self._lock:
            return self._failed

    def success_rate(self) -> float:
        """Successful runs as a percentage of runs started."""
        with self._lock:
            return _percent(self._successful, self._requests())

    def failure_rate(self) -> float:
        with self._lock:
            return _percent(self._failed, self._requests())

    def average_execution_time_ms(self) -> float:
        """Mean elapsed time of successful runs."""
        with self._lock:
            if self._successful == 0:
                return 0.0
            return self._total_time_ms / self._successful

    # -------------------------------------------------------------------------
    # Per-agent
    # -------------------------------------------------------------------------

    def agent_execution_count(self, agent_name: str) -> int:
        with self._lock:
            counters = self._agents.get(agent_name)
            return counters.executions if counters else 0

    def agent_failure_rate(self, agent_name: str) -> float:
        with self._lock:
            counters = self._agents.get(agent_name)
            if counters is None:
                return 0.0
            return _percent(counters.failures, counters.executions)

    def agent_average_execution_time_ms(self, agent_name: str) -> float:
        with self._lock:
            counters = self._agents.get(agent_name)
            if counters is None or counters.executions == 0:
                return 0.0
            return counters.total_time_ms / counters.executions

    def tracked_agents(self) -> set[str]:
        with self._lock:
            return set(self._agents)

    # -------------------------------------------------------------------------
    # Housekeeping
    # -------------------------------------------------------------------------

    def uptime_ms(self) -> float:
        """Milliseconds since construction or the last reset."""
        with self._lock:
            since = self._reset_monotonic
        return max(0.0, (self._clock.monotonic() - since) * 1000.0)

    @property
    def last_reset_time(self) -> datetime:
        with self._lock:
            return self._reset_at

    def reset(self) -> None:
        """Atomically zero all counters and restart uptime."""
        with self._lock:
            self._zero()
        logger.info("Orchestrator metrics reset")

    def snapshot(self) -> MetricsSnapshot:
        """Consistent copy of every counter, taken under one lock."""
        with self._lock:
            agents = {
                name: AgentMetrics(
                    execution_count=c.executions,
                    failure_count=c.failures,
                    failure_rate=_percent(c.failures, c.executions),
                    average_execution_time_ms=(
                        c.total_time_ms / c.executions if c.executions else 0.0
                    ),
                )
                for name, c in self._agents.items()
            }
            requests = self._requests()
            return MetricsSnapshot(
                total_requests=requests,
                successful_runs=self._successful,
                failed_runs=self._failed,
                success_rate=_percent(self._successful, requests),
                failure_rate=_percent(self._failed, requests),
                average_execution_time_ms=(
                    self._total_time_ms / self._successful if self._successful else 0.0
                ),
                agent_metrics=agents,
                uptime_ms=max(0.0, (self._clock.monotonic() - self._reset_monotonic) * 1000.0),
                last_reset_time=self._reset_at.strftime(RESET_TIME_FORMAT),
            )

    def log_summary(self) -> None:
        """Write every counter to the log at INFO level."""
        snap = self.snapshot()
        logger.info("=== Orchestrator Metrics Summary ===")
        logger.info(
            f"Total requests: {snap.total_requests}, Successful: {snap.successful_runs}, "
            f"Failed: {snap.failed_runs}"
        )
        logger.info(
            f"Success rate: {snap.success_rate:.2f}%, "
            f"Average execution time: {snap.average_execution_time_ms:.2f}ms"
        )
        for name, agent in sorted(snap.agent_metrics.items()):
            logger.info(
                f"Agent {name}: {agent.execution_count} executions, "
                f"{agent.failure_rate:.2f}% failure rate, "
                f"{agent.average_execution_time_ms:.2f}ms avg time"
            )
        logger.info(f"Metrics collected over {snap.uptime_ms:.0f}ms")


# Global metrics instance
_global_metrics: Optional[RunMetrics] = None


def get_metrics() -> RunMetrics:
    """Get the process-wide metrics collector."""
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = RunMetrics()
    return _global_metrics


def set_metrics(metrics: Optional[RunMetrics]) -> None:
    """Replace the process-wide collector (None forces a rebuild on next use)."""
    global _global_metrics
    _global_metrics = metrics
