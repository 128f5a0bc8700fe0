"""
Schemas - Market Data

Purpose: Snapshots of externally acquired market state.
A snapshot is fetched once per run and never mutated afterwards,
so every model here is frozen.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DataSource(str, Enum):
    """Where an acquired snapshot came from."""
    LIVE = "live"
    EMERGENCY_CACHE = "emergency_cache"
    DEFAULT = "default"


class MarketSnapshot(BaseModel):
    """
    Point-in-time market data for a single ticker.

    Field names follow the CoinGecko /coins/markets payload so that the
    provider can validate the response directly.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    ticker: str = Field(..., description="Upper-case ticker symbol", min_length=1)
    name: str = Field(default="", description="Display name")
    id: Optional[str] = Field(default=None, description="Provider coin identifier")

    current_price: float = Field(..., description="Current price in the quote currency", ge=0.0)
    price_change_24h: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    price_change_percentage_7d: Optional[float] = None
    price_change_percentage_30d: Optional[float] = None

    market_cap: Optional[float] = None
    market_cap_rank: Optional[int] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None

    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None

    last_updated: Optional[str] = Field(default=None, description="Provider timestamp string")
    retrieved_at: datetime = Field(default_factory=_utcnow)


class PricePoint(BaseModel):
    """Single point of a historical price series."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timestamp: datetime
    price: float = Field(..., ge=0.0)
    volume: Optional[float] = None


class HistoricalSeries(BaseModel):
    """
    Historical price series for a ticker.

    Optional context for agents; a run never fails because it is missing.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    ticker: str = Field(..., min_length=1)
    days: int = Field(..., ge=1, description="Length of the requested window in days")
    points: tuple[PricePoint, ...] = Field(default_factory=tuple)
    retrieved_at: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[misc]
    @property
    def min_price(self) -> Optional[float]:
        return min((p.price for p in self.points), default=None)

    @computed_field  # type: ignore[misc]
    @property
    def max_price(self) -> Optional[float]:
        return max((p.price for p in self.points), default=None)

    @computed_field  # type: ignore[misc]
    @property
    def average_price(self) -> Optional[float]:
        if not self.points:
            return None
        return sum(p.price for p in self.points) / len(self.points)

    @computed_field  # type: ignore[misc]
    @property
    def total_change_percentage(self) -> Optional[float]:
        if len(self.points) < 2 or self.points[0].price == 0:
            return None
        start = self.points[0].price
        return (self.points[-1].price - start) / start * 100
