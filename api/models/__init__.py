"""API request and response models."""

from api.models.requests import AnalyzeRequest, BatchAnalyzeRequest
from api.models.responses import (
    AgentInfo,
    AgentsResponse,
    AnalyzeResponse,
    BatchAnalyzeResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    MetricsResponse,
    ReportResponse,
    ResilienceResponse,
)

__all__ = [
    "AnalyzeRequest",
    "BatchAnalyzeRequest",
    "AgentInfo",
    "AgentsResponse",
    "AnalyzeResponse",
    "BatchAnalyzeResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MetricsResponse",
    "ReportResponse",
    "ResilienceResponse",
]
