"""
CLI Analyze Commands

Run the agent pipeline for one ticker or for several in parallel.

Usage:
    cryptoagents run BTC
    cryptoagents run ETH --provider static --json
    cryptoagents batch BTC ETH SOL --max-workers 2
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from cryptoagents_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_ANALYSIS_FAILED = 2


@dataclass
class RunSummary:
    """Summary of a pipeline run for CLI output."""
    ticker: str = ""
    ok: bool = True
    data_source: str = ""
    operation_id: str = ""
    execution_time_ms: float = 0.0
    trend: str = ""
    risk_level: str = ""
    action: str = ""
    position_size: float = 0.0
    summaries: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["warnings"]:
            del d["warnings"]
        if not d["errors"]:
            del d["errors"]
        return d


def summarize(report) -> RunSummary:
    """Flatten a RunReport into the fields the CLI prints."""
    summary = RunSummary(
        ticker=report.ticker,
        ok=report.success,
        data_source=report.data_source.value if report.data_source else "",
        operation_id=report.operation_id or "",
        execution_time_ms=report.execution_time_ms,
        warnings=list(report.warnings),
        errors=list(report.errors),
    )
    for result in report.results:
        summary.summaries[result.agent_name] = result.result_summary
        if result.kind == "analyst":
            summary.trend = result.market_trend.value
        elif result.kind == "risk":
            summary.risk_level = result.risk_level.value
        elif result.kind == "trade":
            summary.action = result.action.value
            summary.position_size = result.position_size
    return summary


def load_runtime_config(config: CLIConfig, provider: Optional[str] = None):
    """
    Build the RuntimeConfig for this invocation and make it the default.

    The YAML file named in the CLI config is used when it exists; env vars
    override it. `provider` overrides the market data provider.
    """
    from core.config import RuntimeConfig, set_default_config

    runtime: RuntimeConfig
    if config.runtime_config and Path(config.runtime_config).exists():
        runtime = RuntimeConfig.from_yaml(config.runtime_config).with_env_overrides()
        logger.debug(f"Loaded runtime config from {config.runtime_config}")
    else:
        runtime = RuntimeConfig.from_env()

    if provider:
        runtime.market_data.provider = provider

    set_default_config(runtime)
    return runtime


def print_summary_human(summary: RunSummary) -> None:
    """Print summary in human-readable format."""
    print(f"ticker: {summary.ticker}")
    print(f"data_source: {summary.data_source}")
    print(f"operation_id: {summary.operation_id}")
    if summary.trend:
        print(f"trend: {summary.trend}")
    if summary.risk_level:
        print(f"risk: {summary.risk_level}")
    if summary.action:
        print(f"action: {summary.action} (position {summary.position_size:.0%})")
    print(f"time_ms: {summary.execution_time_ms:.0f}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.summaries:
        print("\nagents:")
        for name, text in summary.summaries.items():
            print(f"  {name}: {text}")

    if summary.warnings:
        print(f"\nwarnings ({len(summary.warnings)}):")
        for warning in summary.warnings[:5]:
            print(f"  - {warning}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:5]:
            print(f"  - {err}")


def print_summary_json(summary: RunSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def _cli_config(args: Namespace) -> CLIConfig:
    config: CLIConfig = getattr(args, "cli_config", None)
    return config if config is not None else CLIConfig()


def _wants_json(args: Namespace, config: CLIConfig) -> bool:
    return bool(getattr(args, "json", False)) or config.default_output_format == "json"


def run_cmd(args: Namespace) -> int:
    """
    Execute the run command.

    Returns:
        0 when the run succeeded, 2 when it completed with errors, 1 when
        orchestration aborted
    """
    from core.schemas.errors import OrchestrationException
    from orchestrator import create_pipeline

    config = _cli_config(args)
    runtime = load_runtime_config(config, getattr(args, "provider", None))
    pipeline = create_pipeline(runtime)

    try:
        report = pipeline.run(args.ticker)
    except OrchestrationException as e:
        if _wants_json(args, config):
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump(mode="json")}, indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = summarize(report)
    if _wants_json(args, config):
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if report.success else EXIT_ANALYSIS_FAILED


def batch_cmd(args: Namespace) -> int:
    """
    Execute the batch command.

    Every ticker gets a report; the exit code is 2 if any of them failed.
    """
    from orchestrator import BatchCoordinator, create_pipeline

    config = _cli_config(args)
    runtime = load_runtime_config(config, getattr(args, "provider", None))
    pipeline = create_pipeline(runtime)

    max_workers = args.max_workers if args.max_workers is not None else runtime.pipeline.max_workers
    batch = BatchCoordinator(pipeline, max_workers=max_workers)
    reports = batch.run_many(args.tickers)

    summaries = [summarize(report) for report in reports.values()]
    failed = sum(1 for s in summaries if not s.ok)

    if _wants_json(args, config):
        print(json.dumps({
            "ok": failed == 0,
            "total": len(summaries),
            "successful": len(summaries) - failed,
            "failed": failed,
            "reports": [s.to_dict() for s in summaries],
        }, indent=2))
    else:
        for i, summary in enumerate(summaries):
            if i:
                print()
            print_summary_human(summary)
        print(f"\n{len(summaries) - failed}/{len(summaries)} tickers analyzed successfully")

    if getattr(args, "show_metrics", False):
        pipeline.log_metrics_summary()

    return EXIT_SUCCESS if failed == 0 else EXIT_ANALYSIS_FAILED
