"""
Metrics Routes

Run metrics and resilience gate status.
"""

from fastapi import APIRouter, Depends

from api.deps import get_resilience_gate, get_run_metrics
from api.models.responses import MetricsResponse, ResilienceResponse
from core.resilience import ResilienceGate
from orchestrator import RunMetrics


router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=MetricsResponse)
def get_metrics_snapshot(metrics: RunMetrics = Depends(get_run_metrics)) -> MetricsResponse:
    """Current run and agent counters."""
    return MetricsResponse(ok=True, metrics=metrics.snapshot())


@router.post("/metrics/reset", response_model=MetricsResponse)
def reset_metrics(metrics: RunMetrics = Depends(get_run_metrics)) -> MetricsResponse:
    """Zero all counters; returns the fresh snapshot."""
    metrics.reset()
    return MetricsResponse(ok=True, metrics=metrics.snapshot())


@router.get("/resilience", response_model=ResilienceResponse)
def get_resilience(gate: ResilienceGate = Depends(get_resilience_gate)) -> ResilienceResponse:
    """Circuit breaker state and emergency cache size."""
    return ResilienceResponse(ok=True, **gate.stats().to_dict())
