"""
Runtime Configuration Module

Provides configuration loading and management.
"""

from .runtime import (
    HttpConfig,
    MarketDataConfig,
    PipelineConfig,
    ResilienceConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "HttpConfig",
    "MarketDataConfig",
    "PipelineConfig",
    "ResilienceConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
