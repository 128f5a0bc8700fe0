"""
Batch Coordinator

Fans out independent pipeline runs over a thread pool and collects one
RunReport per requested ticker. A run that fails, or whose worker crashes,
becomes a failed report for its key; nothing escapes `run_many` except a
rejected request.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Iterable, Optional

from core.clock import Clock, RealClock
from core.schemas.errors import InvalidInputException, OrchestrationException

from orchestrator.pipeline import Pipeline
from orchestrator.report import RunReport


logger = logging.getLogger(__name__)


class BatchCoordinator:
    """
    Parallel multi-ticker analysis.

    Usage:
        batch = BatchCoordinator(pipeline)
        reports = batch.run_many(["BTC", "ETH", "SOL"])
        reports["ETH"].success
    """

    def __init__(
        self,
        pipeline: Pipeline,
        *,
        max_workers: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Args:
            pipeline: Pipeline shared by every run
            max_workers: Worker limit; None runs every ticker on its own worker
            clock: Time source for failed-report timestamps
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.pipeline = pipeline
        self.max_workers = max_workers
        self.clock = clock or pipeline.clock or RealClock()

    def run_many(self, tickers: Optional[Iterable[str]]) -> dict[str, RunReport]:
        """
        Analyze tickers concurrently.

        Duplicate tickers run once. Keys are the tickers as given.

        Raises:
            InvalidInputException: If tickers is None or empty
        """
        if tickers is None:
            raise InvalidInputException("Tickers collection cannot be null or empty")
        unique = list(dict.fromkeys(tickers))
        if not unique:
            raise InvalidInputException("Tickers collection cannot be null or empty")

        logger.info(f"Starting parallel analysis for {len(unique)} tickers")
        workers = self.max_workers or len(unique)

        results: dict[str, RunReport] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="batch") as executor:
            futures: dict[Future, str] = {
                executor.submit(self._run_one, ticker): ticker for ticker in unique
            }
            for future in as_completed(futures):
                ticker = futures[future]
                try:
                    results[ticker] = future.result()
                except Exception as e:
                    logger.error(f"Failed to complete analysis for ticker: {ticker}: {e}")
                    results[ticker] = RunReport.failed(
                        ticker,
                        f"Parallel execution failed: {e}",
                        at=self.clock.now(),
                    )

        logger.info(f"Parallel analysis completed for {len(results)} tickers")
        # Request order, not completion order
        return {ticker: results[ticker] for ticker in unique}

    def _run_one(self, ticker: str) -> RunReport:
        try:
            return self.pipeline.run(ticker)
        except OrchestrationException as e:
            logger.error(f"Orchestration failed for ticker: {ticker} in parallel execution: {e.message}")
            return RunReport.failed(
                ticker,
                f"Orchestration failed: {e.message}",
                at=self.clock.now(),
                operation_id=e.operation_id,
            )
