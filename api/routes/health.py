"""
Health Check Route

Liveness and readiness endpoints.
"""

from fastapi import APIRouter, Depends

from api.deps import get_pipeline
from api.models.responses import HealthResponse
from orchestrator import Pipeline


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(pipeline: Pipeline = Depends(get_pipeline)) -> HealthResponse:
    """
    Health check endpoint.

    `ready` reports whether the data source is reachable and every
    registered agent can be built.
    """
    return HealthResponse(
        ok=True,
        service="cryptoagents-api",
        version="v1",
        ready=pipeline.is_ready(),
    )


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """
    Root endpoint - liveness only.
    """
    return HealthResponse(
        ok=True,
        service="cryptoagents-api",
        version="v1",
    )
