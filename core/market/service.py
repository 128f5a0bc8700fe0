"""
Market Data Service

Acquires market data through the resilience gate:

1. if the gate refuses the call, answer from the fallback store
2. otherwise call the provider; any provider error is recorded as a gate
   failure and answered from the fallback store
3. a live snapshot is recorded as a success and cached for later outages

Gate transitions are logged here; the gate itself stays silent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from core.resilience import CircuitState, ResilienceGate, get_gate
from core.schemas.errors import SourceUnavailableException
from core.schemas.market import DataSource, HistoricalSeries, MarketSnapshot

from .provider import MarketDataProvider

if TYPE_CHECKING:
    from core.config import RuntimeConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Acquisition:
    """A snapshot together with where it was obtained."""
    snapshot: MarketSnapshot
    source: DataSource

    @property
    def is_live(self) -> bool:
        return self.source == DataSource.LIVE


def log_transition(old: CircuitState, new: CircuitState) -> None:
    """Transition listener that writes gate state changes to the log."""
    if new == CircuitState.OPEN:
        logger.warning(f"Circuit breaker {old.value} -> OPEN: market data calls blocked")
    elif new == CircuitState.HALF_OPEN:
        logger.info("Circuit breaker OPEN -> HALF_OPEN: probing market data source")
    else:
        logger.info(f"Circuit breaker {old.value} -> {new.value}: market data source recovered")


class MarketDataService:
    """
    Gate-protected access to a market data provider.

    Usage:
        service = MarketDataService(CoinGeckoProvider())
        acquisition = service.get_market_data("BTC")
        if acquisition is None:
            ...  # no live data and no fallback
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        *,
        gate: Optional[ResilienceGate] = None,
        fetch_historical: bool = True,
        history_days: int = 30,
    ) -> None:
        self.provider = provider
        self.gate = gate or get_gate()
        self.fetch_historical = fetch_historical
        self.history_days = history_days
        self.gate.on_transition(log_transition)

    def get_market_data(self, ticker: str) -> Optional[Acquisition]:
        """
        Acquire a snapshot for a ticker.

        Returns:
            The acquisition, or None when neither the provider nor the
            fallback store has a value
        """
        if not self.gate.is_call_allowed():
            logger.warning(f"Circuit breaker open, using fallback data for {ticker}")
            return self._fallback(ticker)

        try:
            snapshot = self.provider.fetch_market_data(ticker)
        except SourceUnavailableException as e:
            logger.error(f"Market data fetch failed for {ticker}: {e.message}")
            self.gate.record_failure()
            return self._fallback(ticker)
        except Exception as e:
            logger.exception(f"Unexpected error fetching market data for {ticker}: {e}")
            self.gate.record_failure()
            return self._fallback(ticker)

        if snapshot is None:
            logger.warning(f"No market data returned for {ticker}")
            return self._fallback(ticker)

        self.gate.record_success(ticker, snapshot)
        return Acquisition(snapshot=snapshot, source=DataSource.LIVE)

    def get_historical_data(self, ticker: str, days: Optional[int] = None) -> Optional[HistoricalSeries]:
        """
        Fetch an optional historical series.

        Failures are logged and reported as None; historical data never
        decides the outcome of a run.
        """
        if not self.fetch_historical:
            return None
        # is_call_allowed() would spend a probe call
        if self.gate.state != CircuitState.CLOSED:
            return None

        try:
            return self.provider.fetch_historical_data(ticker, days or self.history_days)
        except SourceUnavailableException as e:
            logger.warning(f"Historical data unavailable for {ticker}: {e.message}")
            return None
        except Exception as e:
            logger.warning(f"Historical data fetch failed for {ticker}: {e}")
            return None

    def is_available(self) -> bool:
        """Provider reachable and gate not blocking."""
        return self.gate.state != CircuitState.OPEN and self.provider.is_available()

    def _fallback(self, ticker: str) -> Optional[Acquisition]:
        result = self.gate.fallback(ticker)
        if result is None:
            logger.error(f"No fallback data available for {ticker}")
            return None
        logger.info(f"Serving {result.source.value} data for {ticker}")
        return Acquisition(snapshot=result.snapshot, source=result.source)


def create_provider(config: "RuntimeConfig") -> MarketDataProvider:
    """Build the provider named in the configuration."""
    from core.http import HttpClient

    from .coingecko import CoinGeckoProvider
    from .provider import StaticMarketDataProvider

    name = config.market_data.provider.lower()
    if name == "static":
        from core.resilience import DEFAULT_PRICES

        return StaticMarketDataProvider.with_prices(DEFAULT_PRICES)
    if name == "coingecko":
        return CoinGeckoProvider(
            HttpClient.from_config(config),
            base_url=config.market_data.base_url,
            api_key=config.market_data.api_key,
            vs_currency=config.market_data.vs_currency,
        )
    raise ValueError(f"Unknown market data provider: {config.market_data.provider}")


def create_market_data_service(
    config: Optional["RuntimeConfig"] = None,
    *,
    gate: Optional[ResilienceGate] = None,
) -> MarketDataService:
    """Build a service from runtime configuration."""
    if config is None:
        from core.config import get_default_config

        config = get_default_config()
    return MarketDataService(
        create_provider(config),
        gate=gate,
        fetch_historical=config.market_data.fetch_historical,
        history_days=config.market_data.history_days,
    )
