"""
CLI Configuration

Configuration for the CryptoAgents CLI itself (logging, output, API
endpoint). Pipeline settings live in core.config.RuntimeConfig; the CLI
only points at the YAML file to load them from.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


# Environment variable prefix
ENV_PREFIX = "CRYPTOAGENTS_"

DEFAULT_CONFIG_NAME = "cryptoagents.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    # Running API server (metrics command)
    api_url: str = "http://localhost:8000"

    # RuntimeConfig YAML file
    runtime_config: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()
    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", config.default_output_format)
    config.api_url = os.getenv(f"{ENV_PREFIX}API_URL", config.api_url)
    config.runtime_config = os.getenv(f"{ENV_PREFIX}CONFIG")
    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    config.api_url = data.get("api_url", config.api_url)
    config.runtime_config = data.get("runtime_config", config.runtime_config)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in (
            Path.cwd() / DEFAULT_CONFIG_NAME,
            Path.home() / ".config" / "cryptoagents" / "cli.json",
        ):
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Environment takes precedence
    env_config = load_config_from_env()
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = env_config.default_output_format
    if os.getenv(f"{ENV_PREFIX}API_URL"):
        config.api_url = env_config.api_url
    if os.getenv(f"{ENV_PREFIX}CONFIG"):
        config.runtime_config = env_config.runtime_config

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human",
  "api_url": "http://localhost:8000",
  "runtime_config": "cryptoagents.yaml"
}
"""
