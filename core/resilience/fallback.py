"""
Fallback Store

Last-known-good market data served when the upstream source is blocked
or failing. Lookups try, in order:

1. the emergency cache, fed by every successful live acquisition
2. a small table of hardcoded default prices for well-known tickers

Unknown tickers with no cached entry have no fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Optional

from core.clock import Clock, RealClock
from core.schemas.market import DataSource, MarketSnapshot


DEFAULT_PRICES: dict[str, float] = {
    "btc": 45000.0,
    "eth": 3000.0,
    "bnb": 400.0,
    "ada": 0.50,
    "dot": 8.00,
    "sol": 100.0,
    "matic": 1.00,
    "avax": 25.00,
    "link": 15.00,
    "uni": 7.00,
    "ltc": 150.00,
    "xrp": 0.60,
}

DISPLAY_NAMES: dict[str, str] = {
    "btc": "Bitcoin",
    "eth": "Ethereum",
    "bnb": "BNB",
    "ada": "Cardano",
    "dot": "Polkadot",
    "sol": "Solana",
    "matic": "Polygon",
    "avax": "Avalanche",
    "link": "Chainlink",
    "uni": "Uniswap",
    "ltc": "Litecoin",
    "xrp": "XRP",
}


def display_name(ticker: str) -> str:
    """Human name for a ticker, or '<TICKER> Token' when unknown."""
    return DISPLAY_NAMES.get(ticker.lower(), f"{ticker.upper()} Token")


@dataclass(frozen=True)
class FallbackResult:
    """A fallback snapshot and where it came from."""
    snapshot: MarketSnapshot
    source: DataSource


@dataclass(frozen=True)
class _CacheEntry:
    snapshot: MarketSnapshot
    updated_at: datetime


class FallbackStore:
    """Thread-safe emergency cache plus default price table."""

    def __init__(
        self,
        *,
        defaults: Optional[dict[str, float]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._defaults = {k.lower(): v for k, v in (defaults if defaults is not None else DEFAULT_PRICES).items()}
        self._clock = clock or RealClock()
        self._lock = Lock()
        self._cache: dict[str, _CacheEntry] = {}

    @staticmethod
    def _key(ticker: str) -> str:
        return ticker.strip().lower()

    def store(self, ticker: str, snapshot: MarketSnapshot) -> None:
        """Remember a snapshot as the last known good value for a ticker."""
        entry = _CacheEntry(snapshot=snapshot, updated_at=self._clock.now())
        with self._lock:
            self._cache[self._key(ticker)] = entry

    def lookup(self, ticker: str) -> Optional[FallbackResult]:
        """Best-effort value for a ticker, or None when nothing is available."""
        key = self._key(ticker)
        with self._lock:
            entry = self._cache.get(key)
        if entry is not None:
            return FallbackResult(snapshot=entry.snapshot, source=DataSource.EMERGENCY_CACHE)

        price = self._defaults.get(key)
        if price is None:
            return None
        snapshot = MarketSnapshot(
            ticker=key.upper(),
            name=display_name(key),
            current_price=price,
            retrieved_at=self._clock.now(),
        )
        return FallbackResult(snapshot=snapshot, source=DataSource.DEFAULT)

    def has_emergency_data(self, ticker: str) -> bool:
        with self._lock:
            return self._key(ticker) in self._cache

    def last_update(self, ticker: str) -> Optional[datetime]:
        """When the emergency entry for a ticker was last refreshed."""
        with self._lock:
            entry = self._cache.get(self._key(ticker))
        return entry.updated_at if entry else None

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
