"""
CLI Status Command

Read run metrics and gate status from a running API server.

Usage:
    cryptoagents metrics
    cryptoagents metrics --url http://host:8000 --json
    cryptoagents metrics --reset
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from typing import Any

from core.http import HttpClient, HttpError
from cryptoagents_cli.config import CLIConfig


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def fetch_status(client: HttpClient, base_url: str, *, reset: bool = False) -> dict[str, Any]:
    """
    Fetch metrics and resilience status.

    Raises:
        HttpError: On connection failure or a non-2xx response
    """
    base_url = base_url.rstrip("/")
    if reset:
        metrics_response = client.post(f"{base_url}/metrics/reset")
    else:
        metrics_response = client.get(f"{base_url}/metrics")
    metrics_response.raise_for_status()

    gate_response = client.get(f"{base_url}/resilience")
    gate_response.raise_for_status()

    return {
        "metrics": metrics_response.json()["metrics"],
        "resilience": {k: v for k, v in gate_response.json().items() if k != "ok"},
    }


def print_status_human(status: dict[str, Any]) -> None:
    metrics = status["metrics"]
    gate = status["resilience"]

    print(f"total_requests: {metrics['total_requests']}")
    print(f"successful: {metrics['successful_runs']}")
    print(f"failed: {metrics['failed_runs']}")
    print(f"success_rate: {metrics['success_rate']:.2f}%")
    print(f"avg_time_ms: {metrics['average_execution_time_ms']:.2f}")
    print(f"uptime_ms: {metrics['uptime_ms']:.0f}")
    print(f"last_reset: {metrics['last_reset_time']}")

    agents = metrics.get("agent_metrics") or {}
    if agents:
        print("\nagents:")
        for name, agent in sorted(agents.items()):
            print(
                f"  - {name}: {agent['execution_count']} runs, "
                f"{agent['failure_rate']:.2f}% failed, "
                f"{agent['average_execution_time_ms']:.2f}ms avg"
            )

    print(f"\ncircuit: {gate['circuit_state']} (failures: {gate['failure_count']})")
    print(f"emergency_cache: {gate['emergency_cache_size']}")
    if gate.get("last_failure_time"):
        print(f"last_failure: {gate['last_failure_time']}")


def metrics_cmd(args: Namespace) -> int:
    """Execute the metrics command."""
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()
    base_url = args.url or config.api_url

    with HttpClient(timeout=args.timeout) as client:
        try:
            status = fetch_status(client, base_url, reset=args.reset)
        except HttpError as e:
            print(f"Error: cannot reach API at {base_url}: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    if args.json or config.default_output_format == "json":
        print(json.dumps(status, indent=2))
    else:
        print_status_human(status)
    return EXIT_SUCCESS
