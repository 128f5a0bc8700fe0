"""
Tests for the BatchCoordinator

Independent concurrent runs, one report per requested ticker.
"""

import threading

import pytest

from core.schemas.errors import InvalidInputException
from core.schemas.market import DataSource
from orchestrator import BatchCoordinator, Pipeline


class TestBatchCoordinator:
    """Tests for run_many."""

    def test_one_report_per_ticker(self, pipeline):
        """Every requested ticker gets a report under its own key."""
        reports = BatchCoordinator(pipeline).run_many(["BTC", "ETH", "SOL"])

        assert list(reports) == ["BTC", "ETH", "SOL"]
        assert all(r.success for r in reports.values())
        assert reports["ETH"].ticker == "ETH"

    def test_failure_is_isolated(self, pipeline):
        """A failing ticker does not affect the others."""
        reports = BatchCoordinator(pipeline).run_many(["BTC", "NOPE", "ETH"])

        assert reports["BTC"].success is True
        assert reports["ETH"].success is True

        failed = reports["NOPE"]
        assert failed.success is False
        assert failed.results == []
        assert failed.errors[0].startswith("Orchestration failed: ")
        assert "Failed to retrieve market data for ticker: NOPE" in failed.errors[0]

    def test_blank_ticker_in_batch(self, pipeline):
        """A blank entry becomes a failed report, not an exception."""
        reports = BatchCoordinator(pipeline).run_many(["BTC", ""])

        assert reports[""].success is False
        assert reports["BTC"].success is True

    def test_duplicates_run_once(self, pipeline, metrics):
        """Repeated tickers are analyzed once."""
        reports = BatchCoordinator(pipeline).run_many(["BTC", "BTC", "ETH"])

        assert list(reports) == ["BTC", "ETH"]
        assert metrics.total_requests() == 2

    @pytest.mark.parametrize("tickers", [None, [], ()])
    def test_empty_request_rejected(self, pipeline, tickers):
        """None or empty input is rejected before any run."""
        with pytest.raises(InvalidInputException) as exc_info:
            BatchCoordinator(pipeline).run_many(tickers)

        assert exc_info.value.message == "Tickers collection cannot be null or empty"

    def test_invalid_worker_limit(self, pipeline):
        """max_workers below one is rejected."""
        with pytest.raises(ValueError):
            BatchCoordinator(pipeline, max_workers=0)

    def test_worker_limit_respected(self, pipeline):
        """With one worker the runs never overlap."""
        active = []
        peak = []
        lock = threading.Lock()
        original = pipeline.run

        def tracking_run(ticker):
            with lock:
                active.append(ticker)
                peak.append(len(active))
            try:
                return original(ticker)
            finally:
                with lock:
                    active.remove(ticker)

        pipeline.run = tracking_run
        BatchCoordinator(pipeline, max_workers=1).run_many(["BTC", "ETH", "SOL"])

        assert max(peak) == 1

    def test_crashing_run_becomes_failed_report(self, market_service, registry, metrics, frozen_clock):
        """An exception other than OrchestrationException is contained per ticker."""

        class ExplodingPipeline(Pipeline):
            def run(self, ticker):
                if ticker == "ETH":
                    raise RuntimeError("worker died")
                return super().run(ticker)

        pipeline = ExplodingPipeline(market_service, registry=registry, metrics=metrics, clock=frozen_clock)

        reports = BatchCoordinator(pipeline).run_many(["BTC", "ETH"])

        assert reports["BTC"].success is True
        assert reports["ETH"].errors == ["Parallel execution failed: worker died"]
        assert reports["ETH"].finished_at == frozen_clock.now()

    def test_shared_gate_across_runs(self, static_provider, pipeline):
        """Concurrent runs share one gate and its emergency cache."""
        BatchCoordinator(pipeline).run_many(["BTC", "ETH"])
        static_provider.set_failing("BTC", "ETH")

        reports = BatchCoordinator(pipeline).run_many(["BTC", "ETH"])

        assert {r.data_source for r in reports.values()} == {DataSource.EMERGENCY_CACHE}
        assert pipeline.market_data.gate.stats().failure_count == 2
