"""
Pytest configuration and shared fixtures for CryptoAgents tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_snapshot = _common.make_snapshot
make_context = _common.make_context
make_builtin_registry = _common.make_builtin_registry

from core.clock import FrozenClock
from core.market import MarketDataService, StaticMarketDataProvider
from core.resilience import ResilienceGate
from orchestrator import Pipeline, RunMetrics


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def frozen_clock():
    """Provide a FrozenClock starting at 2026-01-01T00:00:00Z."""
    return FrozenClock()


@pytest.fixture
def gate(frozen_clock):
    """Provide an isolated ResilienceGate with default breaker settings."""
    return ResilienceGate.create(clock=frozen_clock)


@pytest.fixture
def static_provider():
    """Provide a StaticMarketDataProvider with BTC, ETH and SOL prices."""
    return StaticMarketDataProvider.with_prices({"BTC": 55000.0, "ETH": 3000.0, "SOL": 40000.0})


@pytest.fixture
def market_service(static_provider, gate):
    """Provide a MarketDataService over the static provider and isolated gate."""
    return MarketDataService(static_provider, gate=gate, fetch_historical=False)


@pytest.fixture
def metrics(frozen_clock):
    """Provide an isolated RunMetrics collector."""
    return RunMetrics(clock=frozen_clock)


@pytest.fixture
def registry():
    """Provide a fresh registry with the built-in agents."""
    return make_builtin_registry()


@pytest.fixture
def pipeline(market_service, registry, metrics, frozen_clock):
    """Provide a Pipeline wired entirely to isolated collaborators."""
    return Pipeline(market_service, registry=registry, metrics=metrics, clock=frozen_clock)


@pytest.fixture
def context():
    """Provide a default RunContext for BTC at 55000."""
    return make_context()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
