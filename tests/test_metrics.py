"""
Tests for RunMetrics

Counters, derived rates, reset semantics and thread safety.
"""

import threading

import pytest

from orchestrator import RunMetrics, get_metrics, set_metrics
from orchestrator.metrics import RESET_TIME_FORMAT


class TestRunCounters:
    """Tests for run-level counters."""

    def test_empty_collector(self, metrics):
        """A fresh collector reports zeros, never divides by zero."""
        assert metrics.total_requests() == 0
        assert metrics.success_rate() == 0.0
        assert metrics.failure_rate() == 0.0
        assert metrics.average_execution_time_ms() == 0.0

    def test_rates(self, metrics):
        """Rates are percentages of runs started."""
        for ticker in ("A", "B", "C", "D"):
            metrics.record_run_start(ticker)
        metrics.record_run_success("A", 100.0)
        metrics.record_run_success("B", 300.0)
        metrics.record_run_success("C", 200.0)
        metrics.record_run_failure("D", "boom")

        assert metrics.total_requests() == 4
        assert metrics.successful_runs() == 3
        assert metrics.failed_runs() == 1
        assert metrics.success_rate() == 75.0
        assert metrics.failure_rate() == 25.0
        assert metrics.average_execution_time_ms() == pytest.approx(200.0)

    def test_failures_do_not_affect_average_time(self, metrics):
        """Only successful runs contribute to the average execution time."""
        metrics.record_run_start("A")
        metrics.record_run_start("B")
        metrics.record_run_success("A", 50.0)
        metrics.record_run_failure("B", "x")

        assert metrics.average_execution_time_ms() == 50.0


class TestAgentCounters:
    """Tests for per-agent counters."""

    def test_agent_counters(self, metrics):
        """Executions, failures and times are tracked per agent."""
        metrics.record_step_execution("ANALYST", 10.0, True)
        metrics.record_step_execution("ANALYST", 30.0, False)
        metrics.record_step_execution("TRADER", 5.0, True)

        assert metrics.agent_execution_count("ANALYST") == 2
        assert metrics.agent_failure_rate("ANALYST") == 50.0
        assert metrics.agent_average_execution_time_ms("ANALYST") == 20.0
        assert metrics.tracked_agents() == {"ANALYST", "TRADER"}

    def test_unknown_agent(self, metrics):
        """Unseen agents report zero."""
        assert metrics.agent_execution_count("GHOST") == 0
        assert metrics.agent_failure_rate("GHOST") == 0.0
        assert metrics.agent_average_execution_time_ms("GHOST") == 0.0


class TestResetAndUptime:
    """Tests for reset and uptime."""

    def test_uptime_follows_clock(self, metrics, frozen_clock):
        """Uptime is measured on the monotonic clock."""
        frozen_clock.advance(2.5)

        assert metrics.uptime_ms() == pytest.approx(2500.0)

    def test_reset_zeroes_everything(self, metrics, frozen_clock):
        """reset() clears counters, restarts uptime and stamps the reset time."""
        metrics.record_run_start("A")
        metrics.record_run_success("A", 10.0)
        metrics.record_step_execution("ANALYST", 10.0, True)
        frozen_clock.advance(60)

        metrics.reset()

        assert metrics.total_requests() == 0
        assert metrics.tracked_agents() == set()
        assert metrics.uptime_ms() == 0.0
        assert metrics.last_reset_time == frozen_clock.now()

    def test_run_spanning_reset_keeps_rates_in_range(self, metrics):
        """A run started before reset and finished after it counts as one request."""
        metrics.record_run_start("A")
        metrics.reset()
        metrics.record_run_success("A", 10.0)

        snap = metrics.snapshot()
        assert snap.total_requests == 1
        assert snap.successful_runs == 1
        assert snap.success_rate == 100.0
        assert metrics.total_requests() == 1
        assert metrics.success_rate() == 100.0

    def test_snapshot(self, metrics, frozen_clock):
        """snapshot() copies every counter at once."""
        metrics.record_run_start("A")
        metrics.record_run_success("A", 40.0)
        metrics.record_step_execution("ANALYST", 40.0, True)
        frozen_clock.advance(1)

        snap = metrics.snapshot()

        assert snap.total_requests == 1
        assert snap.success_rate == 100.0
        assert snap.agent_metrics["ANALYST"].execution_count == 1
        assert snap.uptime_ms == pytest.approx(1000.0)
        assert snap.last_reset_time == "2026-01-01 00:00:00"

    def test_reset_time_format(self):
        """Reset time is rendered as YYYY-MM-DD HH:MM:SS."""
        assert RESET_TIME_FORMAT == "%Y-%m-%d %H:%M:%S"

    def test_log_summary(self, metrics, caplog):
        """log_summary() writes the counters at INFO level."""
        metrics.record_run_start("A")
        metrics.record_run_success("A", 5.0)
        metrics.record_step_execution("ANALYST", 5.0, True)

        with caplog.at_level("INFO", logger="orchestrator.metrics"):
            metrics.log_summary()

        assert "Total requests: 1" in caplog.text
        assert "Agent ANALYST: 1 executions" in caplog.text


class TestConcurrency:
    """Tests for concurrent recording."""

    def test_concurrent_updates_are_not_lost(self):
        """Counts from many threads add up exactly."""
        metrics = RunMetrics()

        def worker(n):
            for _ in range(200):
                metrics.record_run_start(f"T{n}")
                metrics.record_run_success(f"T{n}", 1.0)
                metrics.record_step_execution("ANALYST", 1.0, True)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert metrics.total_requests() == 1600
        assert metrics.successful_runs() == 1600
        assert metrics.agent_execution_count("ANALYST") == 1600

    def test_snapshot_during_reset_is_consistent(self):
        """Rates in a snapshot always match the counts in the same snapshot."""
        metrics = RunMetrics()
        stop = threading.Event()
        bad = []

        def writer():
            while not stop.is_set():
                metrics.record_run_start("A")
                metrics.record_run_success("A", 1.0)

        def resetter():
            while not stop.is_set():
                metrics.reset()

        threads = [threading.Thread(target=writer), threading.Thread(target=resetter)]
        for t in threads:
            t.start()
        for _ in range(500):
            snap = metrics.snapshot()
            expected = snap.successful_runs * 100.0 / snap.total_requests if snap.total_requests else 0.0
            if snap.success_rate != expected:
                bad.append(snap)
        stop.set()
        for t in threads:
            t.join()

        assert bad == []


class TestGlobalMetrics:
    """Tests for the process-wide collector."""

    def test_get_and_set(self):
        """set_metrics replaces the shared instance."""
        custom = RunMetrics()
        set_metrics(custom)
        try:
            assert get_metrics() is custom
        finally:
            set_metrics(None)
        assert get_metrics() is not custom
