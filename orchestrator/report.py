"""
Run Report

Aggregated outcome of one pipeline run for one ticker.

Errors and warnings are kept apart:
- add_error() records a failure and flips `success` to False for good
- add_warning() records an agent that was skipped; the run stays successful
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.schemas.analysis import StepResult
from core.schemas.market import DataSource


@dataclass
class RunReport:
    """Complete result of a pipeline run."""

    ticker: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    execution_time_ms: float = 0.0
    results: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    step_times_ms: dict[str, float] = field(default_factory=dict)
    data_source: Optional[DataSource] = None
    operation_id: Optional[str] = None
    _success: bool = field(default=True, repr=False)

    @property
    def success(self) -> bool:
        return self._success

    def add_error(self, error: str) -> None:
        """Add an error message and mark the report as failed."""
        self.errors.append(error)
        self._success = False

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def add_result(self, result: StepResult) -> None:
        self.results.append(result)

    def record_step_time(self, agent_name: str, elapsed_ms: float) -> None:
        self.step_times_ms[agent_name] = elapsed_ms

    def finish(self, finished_at: datetime, execution_time_ms: float) -> None:
        """Stamp the end of the run."""
        self.finished_at = finished_at
        self.execution_time_ms = execution_time_ms

    def get_result(self, agent_name: str) -> Optional[StepResult]:
        for result in self.results:
            if result.agent_name == agent_name:
                return result
        return None

    @property
    def agent_names(self) -> list[str]:
        return [r.agent_name for r in self.results]

    @classmethod
    def failed(
        cls,
        ticker: str,
        error: str,
        *,
        at: datetime,
        operation_id: Optional[str] = None,
    ) -> "RunReport":
        """A finished report for a run that never produced results."""
        report = cls(ticker=ticker, started_at=at, operation_id=operation_id)
        report.add_error(error)
        report.finish(at, 0.0)
        return report

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "success": self.success,
            "operation_id": self.operation_id,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "execution_time_ms": self.execution_time_ms,
            "data_source": self.data_source.value if self.data_source else None,
            "results": [r.model_dump(mode="json") for r in self.results],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "step_times_ms": dict(self.step_times_ms),
        }
