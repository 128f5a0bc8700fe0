"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from orchestrator.metrics import MetricsSnapshot


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "cryptoagents-api"
    version: str = "v1"
    ready: Optional[bool] = Field(default=None, description="Data source and agents available")


class ReportResponse(BaseModel):
    """One run report."""

    ticker: str
    success: bool
    operation_id: Optional[str] = None
    started_at: str
    finished_at: Optional[str] = None
    execution_time_ms: float = 0.0
    data_source: Optional[str] = Field(default=None, description="live, emergency_cache or default")
    results: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    step_times_ms: dict[str, float] = Field(default_factory=dict)


class AnalyzeResponse(BaseModel):
    """Response for single-ticker analysis."""

    ok: bool = Field(..., description="Whether the run succeeded")
    report: ReportResponse


class BatchAnalyzeResponse(BaseModel):
    """Response for POST /analyze/batch."""

    ok: bool = Field(..., description="Whether every run succeeded")
    total: int
    successful: int
    failed: int
    reports: dict[str, ReportResponse] = Field(default_factory=dict)


class MetricsResponse(BaseModel):
    """Response for GET /metrics."""

    ok: bool = True
    metrics: MetricsSnapshot


class ResilienceResponse(BaseModel):
    """Response for GET /resilience."""

    ok: bool = True
    circuit_state: str
    failure_count: int
    emergency_cache_size: int
    last_failure_time: Optional[str] = None


class AgentInfo(BaseModel):
    """One registered agent."""

    name: str
    priority: int
    version: str
    description: str = ""
    requires: list[str] = Field(default_factory=list)


class AgentsResponse(BaseModel):
    """Response for GET /agents."""

    ok: bool = True
    agents: list[AgentInfo] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
