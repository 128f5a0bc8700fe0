"""
API Dependencies

Dependency injection for the API. Routes receive the pipeline, batch
coordinator, metrics and gate through FastAPI `Depends`, so tests can
swap them with `app.dependency_overrides`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from core.config import RuntimeConfig, get_default_config, set_default_config
from core.resilience import ResilienceGate, get_gate
from orchestrator import BatchCoordinator, Pipeline, RunMetrics, create_pipeline, get_metrics

logger = logging.getLogger(__name__)


_pipeline: Optional[Pipeline] = None


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a YAML file, then overlay environment variables.

    Search order for the config file:
      1. $CRYPTOAGENTS_CONFIG
      2. ./cryptoagents.yaml
      3. ~/.config/cryptoagents/config.yaml

    Environment variables ALWAYS override config file values.
    """
    candidates = []
    if os.getenv("CRYPTOAGENTS_CONFIG"):
        candidates.append(Path(os.environ["CRYPTOAGENTS_CONFIG"]))
    candidates.extend([
        Path.cwd() / "cryptoagents.yaml",
        Path.home() / ".config" / "cryptoagents" / "config.yaml",
    ])

    for path in candidates:
        if path.exists():
            try:
                config = RuntimeConfig.from_yaml(path)
                logger.info(f"Loaded config from {path}")
                return config.with_env_overrides()
            except Exception as e:
                logger.warning(f"Failed to parse {path}: {e}")

    return RuntimeConfig.from_env()


def get_config() -> RuntimeConfig:
    """Process-wide runtime configuration, loaded on first use."""
    return get_default_config()


def init_config() -> RuntimeConfig:
    """Load configuration from file and environment and make it the default."""
    config = _load_runtime_config()
    set_default_config(config)
    return config


def get_pipeline() -> Pipeline:
    """Shared pipeline over the process-wide gate, registry and metrics."""
    global _pipeline
    if _pipeline is None:
        _pipeline = create_pipeline(get_config())
    return _pipeline


def get_batch() -> BatchCoordinator:
    return BatchCoordinator(get_pipeline(), max_workers=get_config().pipeline.max_workers)


def get_run_metrics() -> RunMetrics:
    return get_metrics()


def get_resilience_gate() -> ResilienceGate:
    return get_gate()


def reset_dependencies() -> None:
    """Drop the cached pipeline (used when configuration changes)."""
    global _pipeline
    _pipeline = None
