"""
Pipeline Orchestrator

Runs the registered agents, in priority order, over one ticker:

1. validate the ticker
2. acquire market data through the gate-protected MarketDataService
3. run each agent against a fresh RunContext, threading results forward
4. return a RunReport

Failure policy:
- an agent that cannot run is skipped with a warning
- an agent raising AgentAnalysisException is recorded as an error and the
  run continues
- an agent returning nothing, or raising anything else, aborts the run
  with OrchestrationException
- a run with no results at all aborts with OrchestrationException
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

from agents import AgentRegistry, RunContext, get_registry
from agents.base import Agent
from core.clock import Clock, RealClock, elapsed_ms
from core.config import PipelineConfig, RuntimeConfig
from core.market import Acquisition, MarketDataService, create_market_data_service
from core.schemas.errors import (
    AgentAnalysisException,
    OrchestrationException,
    OrchestrationReason,
)

from orchestrator.metrics import RunMetrics, get_metrics
from orchestrator.report import RunReport


logger = logging.getLogger(__name__)


# Stage labels used in OrchestrationException messages
STAGE_VALIDATION = "VALIDATION"
STAGE_DATA_RETRIEVAL = "DATA_RETRIEVAL"
STAGE_NO_RESULTS = "NO_RESULTS"
STAGE_UNEXPECTED = "UNEXPECTED_ERROR"


class Pipeline:
    """
    Main pipeline runner for single-ticker analysis.

    A Pipeline holds no per-run state; one instance may serve many
    concurrent runs.

    Usage:
        pipeline = create_pipeline()
        report = pipeline.run("BTC")
    """

    def __init__(
        self,
        market_data: MarketDataService,
        *,
        registry: Optional[AgentRegistry] = None,
        metrics: Optional[RunMetrics] = None,
        config: Optional[PipelineConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            market_data: Gate-protected market data access
            registry: Agent registry (global registry if omitted)
            metrics: Metrics collector (global collector if omitted)
            config: Pipeline configuration
            clock: Time source for timestamps and durations
        """
        self.market_data = market_data
        self.registry = registry if registry is not None else get_registry()
        self.metrics = metrics if metrics is not None else get_metrics()
        self.config = config or PipelineConfig()
        self.clock = clock or RealClock()

    def run(self, ticker: str) -> RunReport:
        """
        Execute the full pipeline for one ticker.

        Raises:
            OrchestrationException: On invalid input, missing market data,
                an agent producing nothing or failing unexpectedly, a run
                without any result, or any other fault during the run
        """
        operation_id = uuid4().hex[:8]
        logger.info(f"Starting analysis for ticker: {ticker} [operationId: {operation_id}]")
        self.metrics.record_run_start(ticker)
        started = self.clock.monotonic()

        try:
            report = self._execute(ticker, operation_id)
        except OrchestrationException as e:
            self.metrics.record_run_failure(ticker, e.message)
            logger.error(
                f"Orchestration failed for ticker: {ticker} after "
                f"{elapsed_ms(self.clock, started):.0f}ms [operationId: {operation_id}]"
            )
            raise
        except Exception as e:
            self.metrics.record_run_failure(ticker, f"Unexpected error during analysis: {e}")
            logger.exception(f"Unexpected error during analysis for ticker: {ticker} [operationId: {operation_id}]")
            raise OrchestrationException(
                OrchestrationReason.STEP_UNEXPECTED,
                ticker,
                STAGE_UNEXPECTED,
                f"Unexpected error during analysis: {e}",
                operation_id=operation_id,
                cause=e,
            ) from e

        if report.success:
            self.metrics.record_run_success(ticker, report.execution_time_ms)
        else:
            self.metrics.record_run_failure(ticker, "; ".join(report.errors))

        logger.info(
            f"Analysis completed for ticker: {report.ticker} in {report.execution_time_ms:.0f}ms. "
            f"Success: {report.success} [operationId: {operation_id}]"
        )
        return report

    def _execute(self, ticker: str, operation_id: str) -> RunReport:
        if ticker is None or not str(ticker).strip():
            raise OrchestrationException(
                OrchestrationReason.INVALID_INPUT,
                ticker,
                STAGE_VALIDATION,
                "Ticker cannot be null or empty",
                operation_id=operation_id,
            )
        symbol = ticker.strip().upper()

        acquisition = self.market_data.get_market_data(symbol)
        if acquisition is None:
            raise OrchestrationException(
                OrchestrationReason.DATA_UNAVAILABLE,
                symbol,
                STAGE_DATA_RETRIEVAL,
                f"Failed to retrieve market data for ticker: {symbol}",
                operation_id=operation_id,
            )

        ctx = self._build_context(symbol, acquisition, operation_id)
        report = RunReport(
            ticker=symbol,
            started_at=self.clock.now(),
            data_source=acquisition.source,
            operation_id=operation_id,
        )

        for entry in self.registry.list_agents():
            self._run_agent(entry.name, ctx, report, operation_id)

        if not report.results:
            raise OrchestrationException(
                OrchestrationReason.NO_RESULTS,
                symbol,
                STAGE_NO_RESULTS,
                "No agent produced a result",
                operation_id=operation_id,
            )

        report.finish(self.clock.now(), ctx.elapsed_ms())
        return report

    def _build_context(self, symbol: str, acquisition: Acquisition, operation_id: str) -> RunContext:
        historical = self.market_data.get_historical_data(symbol)
        if historical is None:
            logger.debug(f"No historical data available for ticker: {symbol}")

        ctx = RunContext.create(
            symbol,
            acquisition.snapshot,
            historical_data=historical,
            run_id=operation_id,
            clock=self.clock,
        )
        ctx.put("data_source", acquisition.source.value)
        ctx.put("operation_id", operation_id)
        return ctx

    def _run_agent(
        self,
        name: str,
        ctx: RunContext,
        report: RunReport,
        operation_id: str,
    ) -> None:
        """Run one agent and apply the failure policy to its outcome."""
        started = self.clock.monotonic()
        try:
            agent = self.registry.resolve(name)
            agent_name = agent.name

            if not agent.can_run(ctx):
                warning = f"Agent {agent_name} cannot analyze ticker: {ctx.ticker}"
                logger.warning(warning)
                report.add_warning(warning)
                self.metrics.record_step_execution(agent_name, elapsed_ms(self.clock, started), False)
                return

            logger.debug(f"Executing agent: {agent_name} for ticker: {ctx.ticker}")
            result = agent.run(ctx)
        except AgentAnalysisException as e:
            error = f"Agent {name} failed analysis: {e.message}"
            logger.warning(error)
            report.add_error(error)
            self.metrics.record_step_execution(name, elapsed_ms(self.clock, started), False)
            return
        except Exception as e:
            self.metrics.record_step_execution(name, elapsed_ms(self.clock, started), False)
            raise OrchestrationException(
                OrchestrationReason.STEP_UNEXPECTED,
                ctx.ticker,
                name,
                f"Unexpected error in agent {name}: {e}",
                operation_id=operation_id,
                cause=e,
            ) from e

        took = elapsed_ms(self.clock, started)
        if result is None:
            error = f"Agent {agent_name} returned null result for ticker: {ctx.ticker}"
            logger.error(error)
            report.add_error(error)
            self.metrics.record_step_execution(agent_name, took, False)
            raise OrchestrationException(
                OrchestrationReason.STEP_PRODUCED_NOTHING,
                ctx.ticker,
                agent_name,
                error,
                operation_id=operation_id,
            )

        ctx.add_result(agent_name, result)
        report.add_result(result)
        report.record_step_time(agent_name, took)
        self.metrics.record_step_execution(agent_name, took, True)
        logger.info(f"Agent {agent_name} completed analysis for ticker: {ctx.ticker} in {took:.0f}ms")

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def available_agents(self) -> list[Agent]:
        """Fresh instances of the registered agents in execution order."""
        return self.registry.ordered_steps()

    def is_ready(self) -> bool:
        """Data source reachable and every registered agent resolvable."""
        try:
            data_ready = self.market_data.is_available()
        except Exception as e:
            logger.error(f"Error checking data source readiness: {e}")
            data_ready = False

        agents_ready = len(self.registry) > 0 and all(
            self.registry.supports(name) for name in self.registry.names()
        )
        logger.debug(f"Pipeline ready status: dataService={data_ready}, agents={agents_ready}")
        return data_ready and agents_ready

    def log_metrics_summary(self) -> None:
        self.metrics.log_summary()


# =============================================================================
# Factory Functions
# =============================================================================

def create_pipeline(
    config: Optional[RuntimeConfig] = None,
    *,
    registry: Optional[AgentRegistry] = None,
    metrics: Optional[RunMetrics] = None,
) -> Pipeline:
    """
    Build a pipeline from runtime configuration.

    Uses the process-wide gate, registry and metrics unless given.
    """
    if config is None:
        from core.config import get_default_config

        config = get_default_config()
    return Pipeline(
        create_market_data_service(config),
        registry=registry,
        metrics=metrics,
        config=config.pipeline,
    )


def create_test_pipeline(
    prices: Optional[dict[str, float]] = None,
    *,
    registry: Optional[AgentRegistry] = None,
    clock: Optional[Clock] = None,
) -> Pipeline:
    """
    Build an isolated pipeline over static prices.

    Gets its own gate and metrics, so tests never touch process-wide state.
    """
    from core.market import StaticMarketDataProvider
    from core.resilience import ResilienceGate

    clock = clock or RealClock()
    provider = StaticMarketDataProvider.with_prices(prices or {"BTC": 55000.0, "ETH": 3000.0})
    service = MarketDataService(
        provider,
        gate=ResilienceGate.create(clock=clock),
        fetch_historical=False,
    )
    return Pipeline(
        service,
        registry=registry,
        metrics=RunMetrics(clock=clock),
        clock=clock,
    )
