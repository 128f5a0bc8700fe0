"""
CoinGecko Provider

Market data from the public CoinGecko v3 API:

- GET /coins/markets                      current snapshot
- GET /coins/{id}/market_chart            historical prices
- GET /ping                               availability
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.http import HttpClient, HttpError
from core.schemas.market import HistoricalSeries, MarketSnapshot, PricePoint

from .provider import BaseMarketDataProvider


logger = logging.getLogger(__name__)


# Ticker symbol -> CoinGecko coin id
COIN_IDS: dict[str, str] = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "bnb": "binancecoin",
    "ada": "cardano",
    "dot": "polkadot",
    "sol": "solana",
    "matic": "matic-network",
    "avax": "avalanche-2",
    "link": "chainlink",
    "uni": "uniswap",
    "ltc": "litecoin",
    "xrp": "ripple",
    "doge": "dogecoin",
    "atom": "cosmos",
}


class CoinGeckoProvider(BaseMarketDataProvider):
    """
    CoinGecko market data provider.

    Usage:
        provider = CoinGeckoProvider(HttpClient(timeout=10))
        snapshot = provider.fetch_market_data("BTC")
    """

    source_id = "coingecko"

    def __init__(
        self,
        http: Optional[HttpClient] = None,
        *,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: Optional[str] = None,
        vs_currency: str = "usd",
        coin_ids: Optional[dict[str, str]] = None,
    ) -> None:
        self.http = http or HttpClient()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.vs_currency = vs_currency
        self.coin_ids = dict(COIN_IDS if coin_ids is None else coin_ids)

    def coin_id(self, ticker: str) -> Optional[str]:
        return self.coin_ids.get(ticker.strip().lower())

    def supports(self, ticker: str) -> bool:
        return self.coin_id(ticker) is not None

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        try:
            response = self.http.get(f"{self.base_url}{path}", headers=headers, params=params)
        except HttpError as e:
            raise self._unavailable(str(e)) from e

        if not response.ok:
            raise self._unavailable(f"HTTP {response.status_code} for {path}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise self._unavailable(f"invalid JSON from {path}") from e

    def fetch_market_data(self, ticker: str) -> Optional[MarketSnapshot]:
        coin_id = self.coin_id(ticker)
        if coin_id is None:
            logger.debug(f"No CoinGecko id for ticker {ticker}")
            return None

        payload = self._get_json(
            "/coins/markets",
            params={
                "vs_currency": self.vs_currency,
                "ids": coin_id,
                "order": "market_cap_desc",
                "per_page": 1,
                "page": 1,
                "sparkline": "false",
                "price_change_percentage": "24h,7d,30d",
            },
        )
        if not isinstance(payload, list) or not payload:
            return None

        row = dict(payload[0])
        # The 7d/30d changes come back under *_in_currency keys
        row.setdefault(
            "price_change_percentage_7d",
            row.get("price_change_percentage_7d_in_currency"),
        )
        row.setdefault(
            "price_change_percentage_30d",
            row.get("price_change_percentage_30d_in_currency"),
        )
        if row.get("current_price") is None:
            return None
        row["ticker"] = ticker.strip().upper()
        try:
            return MarketSnapshot.model_validate(row)
        except ValueError as e:
            raise self._unavailable("invalid /coins/markets payload") from e

    def fetch_historical_data(self, ticker: str, days: int) -> Optional[HistoricalSeries]:
        coin_id = self.coin_id(ticker)
        if coin_id is None:
            return None

        payload = self._get_json(
            f"/coins/{coin_id}/market_chart",
            params={"vs_currency": self.vs_currency, "days": days},
        )
        if not isinstance(payload, dict):
            raise self._unavailable("invalid market_chart payload")

        try:
            volumes = {int(ts): vol for ts, vol in payload.get("total_volumes", [])}
            points = tuple(
                PricePoint(
                    timestamp=datetime.fromtimestamp(ts / 1000, tz=timezone.utc),
                    price=price,
                    volume=volumes.get(int(ts)),
                )
                for ts, price in payload.get("prices", [])
            )
            return HistoricalSeries(ticker=ticker.strip().upper(), days=days, points=points)
        except (TypeError, ValueError) as e:
            raise self._unavailable("invalid market_chart payload") from e

    def is_available(self) -> bool:
        try:
            self._get_json("/ping")
        except Exception as e:
            logger.warning(f"CoinGecko ping failed: {e}")
            return False
        return True
