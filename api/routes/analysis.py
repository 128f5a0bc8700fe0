"""
Analysis Routes

Run the agent pipeline for one ticker or a batch, and list the agents.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from agents import get_registry
from api.deps import get_batch, get_pipeline
from api.errors import InvalidRequestError, from_domain_error
from api.models.requests import AnalyzeRequest, BatchAnalyzeRequest
from api.models.responses import (
    AgentInfo,
    AgentsResponse,
    AnalyzeResponse,
    BatchAnalyzeResponse,
    ReportResponse,
)
from core.schemas.errors import InvalidInputException, OrchestrationException
from orchestrator import BatchCoordinator, Pipeline, RunReport


logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


def build_report(report: RunReport) -> ReportResponse:
    """Convert a RunReport to its response model."""
    return ReportResponse(**report.to_dict())


def _analyze(pipeline: Pipeline, ticker: str) -> AnalyzeResponse:
    try:
        report = pipeline.run(ticker)
    except OrchestrationException as e:
        raise from_domain_error(e) from e
    return AnalyzeResponse(ok=report.success, report=build_report(report))


@router.get("/analyze/{ticker}", response_model=AnalyzeResponse)
def analyze_ticker(ticker: str, pipeline: Pipeline = Depends(get_pipeline)) -> AnalyzeResponse:
    """Run the pipeline for one ticker."""
    return _analyze(pipeline, ticker)


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest, pipeline: Pipeline = Depends(get_pipeline)) -> AnalyzeResponse:
    """Run the pipeline for the ticker in the request body."""
    return _analyze(pipeline, request.ticker)


@router.post("/analyze/batch", response_model=BatchAnalyzeResponse)
def analyze_batch(
    request: BatchAnalyzeRequest,
    batch: BatchCoordinator = Depends(get_batch),
) -> BatchAnalyzeResponse:
    """
    Run the pipeline for several tickers in parallel.

    Every requested ticker gets a report; individual failures never fail
    the request.
    """
    if request.max_workers is not None:
        batch = BatchCoordinator(batch.pipeline, max_workers=request.max_workers)

    try:
        reports = batch.run_many(request.tickers)
    except InvalidInputException as e:
        raise InvalidRequestError(e.message) from e

    successful = sum(1 for r in reports.values() if r.success)
    return BatchAnalyzeResponse(
        ok=successful == len(reports),
        total=len(reports),
        successful=successful,
        failed=len(reports) - successful,
        reports={ticker: build_report(r) for ticker, r in reports.items()},
    )


@router.get("/agents", response_model=AgentsResponse)
async def list_agents() -> AgentsResponse:
    """Registered agents in execution order."""
    return AgentsResponse(
        ok=True,
        agents=[
            AgentInfo(
                name=entry.name,
                priority=entry.priority,
                version=entry.version,
                description=entry.metadata.get("description", ""),
                requires=list(entry.metadata.get("requires", [])),
            )
            for entry in get_registry().list_agents()
        ],
    )
