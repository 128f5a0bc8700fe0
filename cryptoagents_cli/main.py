"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m cryptoagents_cli run BTC [--provider static] [--json]
    python -m cryptoagents_cli batch BTC ETH SOL [--max-workers N] [--json]
    python -m cryptoagents_cli agents [--json]
    python -m cryptoagents_cli metrics [--url URL] [--reset] [--json]
    python -m cryptoagents_cli config --init

Environment Variables:
    CRYPTOAGENTS_LOG_LEVEL          Log level (default: INFO)
    CRYPTOAGENTS_LOG_FILE           Also write logs to this file
    CRYPTOAGENTS_OUTPUT_FORMAT      human or json
    CRYPTOAGENTS_API_URL            API server for the metrics command
    CRYPTOAGENTS_CONFIG             Runtime YAML config path
    CRYPTOAGENTS_MARKET_PROVIDER    coingecko or static
    COINGECKO_API_KEY               CoinGecko demo API key
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from cryptoagents_cli import __version__
from cryptoagents_cli.commands import analyze, status
from cryptoagents_cli.config import DEFAULT_CONFIG_NAME, get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_ANALYSIS_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="cryptoagents",
        description="CryptoAgents CLI - Run the multi-agent analysis pipeline and inspect its state.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to CLI configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/cryptoagents/cli.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- run command ---
    run_parser = subparsers.add_parser(
        "run",
        help="Analyze one ticker",
        description="Run every registered agent over one ticker and print the report.",
    )
    run_parser.add_argument(
        "ticker",
        type=str,
        help="Ticker symbol, e.g. BTC",
    )
    run_parser.add_argument(
        "--provider",
        type=str,
        choices=["coingecko", "static"],
        default=None,
        help="Market data provider (default: from runtime config)",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    run_parser.set_defaults(func=analyze.run_cmd)

    # --- batch command ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Analyze several tickers in parallel",
        description="Run independent pipelines concurrently; one report per ticker.",
    )
    batch_parser.add_argument(
        "tickers",
        nargs="+",
        help="Ticker symbols",
    )
    batch_parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Worker limit (default: one worker per ticker)",
    )
    batch_parser.add_argument(
        "--provider",
        type=str,
        choices=["coingecko", "static"],
        default=None,
        help="Market data provider (default: from runtime config)",
    )
    batch_parser.add_argument(
        "--show-metrics",
        action="store_true",
        default=False,
        help="Log a metrics summary after the batch",
    )
    batch_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    batch_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    batch_parser.set_defaults(func=analyze.batch_cmd)

    # --- metrics command ---
    metrics_parser = subparsers.add_parser(
        "metrics",
        help="Show metrics of a running API server",
        description="Fetch run metrics and circuit breaker status from the HTTP API.",
    )
    metrics_parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="API base URL (default: from config, http://localhost:8000)",
    )
    metrics_parser.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Reset the counters before reading them",
    )
    metrics_parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Request timeout in seconds (default: 10)",
    )
    metrics_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    metrics_parser.set_defaults(func=status.metrics_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    # --- agents command ---
    agents_parser = subparsers.add_parser(
        "agents",
        help="List registered agents",
        description="Show all registered agents in execution order.",
    )
    agents_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    agents_parser.set_defaults(func=agents_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (CRYPTOAGENTS_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        path = Path(args.path)
        config = load_config(path if path.exists() else None)
        runtime = analyze.load_runtime_config(config)
        print(json.dumps({"cli": config.to_dict(), "runtime": runtime.to_dict()}, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: cryptoagents config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def agents_cmd(args: argparse.Namespace) -> int:
    """Handle agents command."""
    from agents import get_registry

    entries = get_registry().list_agents()

    if args.json:
        data = [
            {
                "name": e.name,
                "version": e.version,
                "priority": e.priority,
                "description": e.metadata.get("description", ""),
                "requires": list(e.metadata.get("requires", [])),
            }
            for e in entries
        ]
        print(json.dumps(data, indent=2))
        return EXIT_SUCCESS

    if not entries:
        print("No agents registered")
        return EXIT_SUCCESS

    for e in entries:
        print(f"  - {e.name} ({e.version}) [priority={e.priority}]")
        description = e.metadata.get("description")
        if description:
            print(f"    {description}")
        requires = e.metadata.get("requires")
        if requires:
            print(f"    requires: {', '.join(requires)}")

    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=analysis completed with errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
