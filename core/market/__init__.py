"""
Market Data Module

Providers for current and historical market data, and the gate-protected
service the pipeline acquires its input through.
"""

from .coingecko import COIN_IDS, CoinGeckoProvider
from .provider import BaseMarketDataProvider, MarketDataProvider, StaticMarketDataProvider
from .service import (
    Acquisition,
    MarketDataService,
    create_market_data_service,
    create_provider,
    log_transition,
)

__all__ = [
    "COIN_IDS",
    "CoinGeckoProvider",
    "BaseMarketDataProvider",
    "MarketDataProvider",
    "StaticMarketDataProvider",
    "Acquisition",
    "MarketDataService",
    "create_market_data_service",
    "create_provider",
    "log_transition",
]
