"""
API Request Models

Pydantic models for API request bodies.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze."""

    ticker: str = Field(
        ...,
        max_length=20,
        description="Ticker symbol to analyze, e.g. BTC",
    )


class BatchAnalyzeRequest(BaseModel):
    """Request body for POST /analyze/batch."""

    tickers: list[str] = Field(
        ...,
        max_length=50,
        description="Ticker symbols to analyze in parallel",
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        le=50,
        description="Worker limit (default: one worker per ticker)",
    )
