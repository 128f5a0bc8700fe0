"""
Market Data Provider Interface

Defines the provider protocol consumed by MarketDataService, a base class
with shared helpers, and an in-memory provider for tests and offline runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from core.schemas.errors import SourceUnavailableException
from core.schemas.market import HistoricalSeries, MarketSnapshot


@runtime_checkable
class MarketDataProvider(Protocol):
    """Protocol defining the market data source interface."""

    source_id: str

    def fetch_market_data(self, ticker: str) -> Optional[MarketSnapshot]:
        """
        Fetch the current snapshot for a ticker.

        Returns None when the source has no data for the ticker.

        Raises:
            SourceUnavailableException: When the upstream call fails
        """
        ...

    def fetch_historical_data(self, ticker: str, days: int) -> Optional[HistoricalSeries]:
        """Fetch a historical price series, or None when unavailable."""
        ...

    def is_available(self) -> bool:
        """Check whether the upstream source is reachable."""
        ...


class BaseMarketDataProvider(ABC):
    """
    Abstract base class for market data providers.

    Subclasses implement the two fetch methods; availability defaults to True.
    """

    source_id: str = "base"

    @abstractmethod
    def fetch_market_data(self, ticker: str) -> Optional[MarketSnapshot]:
        pass

    def fetch_historical_data(self, ticker: str, days: int) -> Optional[HistoricalSeries]:
        return None

    def is_available(self) -> bool:
        return True

    def _unavailable(
        self,
        message: str,
        status_code: Optional[int] = None,
    ) -> SourceUnavailableException:
        """Build the exception raised for upstream failures."""
        return SourceUnavailableException(
            f"{self.source_id}: {message}",
            source=self.source_id,
            status_code=status_code,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source_id={self.source_id})"


class StaticMarketDataProvider(BaseMarketDataProvider):
    """
    In-memory provider serving preset snapshots.

    Tickers listed in `failing` raise SourceUnavailableException, which lets
    tests drive the resilience gate without a network.
    """

    source_id = "static"

    def __init__(
        self,
        snapshots: Optional[dict[str, MarketSnapshot]] = None,
        *,
        history: Optional[dict[str, HistoricalSeries]] = None,
        failing: Optional[set[str]] = None,
        available: bool = True,
    ) -> None:
        self._snapshots = {k.upper(): v for k, v in (snapshots or {}).items()}
        self._history = {k.upper(): v for k, v in (history or {}).items()}
        self._failing = {t.upper() for t in (failing or set())}
        self._available = available
        self.calls: list[str] = []

    @classmethod
    def with_prices(cls, prices: dict[str, float], **kwargs) -> "StaticMarketDataProvider":
        """Build a provider from a ticker -> price mapping."""
        snapshots = {
            ticker.upper(): MarketSnapshot(ticker=ticker.upper(), name=ticker.upper(), current_price=price)
            for ticker, price in prices.items()
        }
        return cls(snapshots, **kwargs)

    def set_failing(self, *tickers: str) -> None:
        self._failing = {t.upper() for t in tickers}

    def fetch_market_data(self, ticker: str) -> Optional[MarketSnapshot]:
        key = ticker.upper()
        self.calls.append(key)
        if key in self._failing:
            raise self._unavailable(f"simulated outage for {key}")
        return self._snapshots.get(key)

    def fetch_historical_data(self, ticker: str, days: int) -> Optional[HistoricalSeries]:
        key = ticker.upper()
        if key in self._failing:
            raise self._unavailable(f"simulated outage for {key}")
        return self._history.get(key)

    def is_available(self) -> bool:
        return self._available
