"""
Tests for the CLI

Commands run against the static provider so no network is needed.
"""

import json

import pytest

from core.config import set_default_config
from core.resilience import set_gate
from cryptoagents_cli.commands import status
from cryptoagents_cli.main import (
    EXIT_ANALYSIS_FAILED,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    create_parser,
    main,
)
from orchestrator import set_metrics


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory with fresh global state."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "CRYPTOAGENTS_CONFIG",
        "CRYPTOAGENTS_OUTPUT_FORMAT",
        "CRYPTOAGENTS_MARKET_PROVIDER",
        "CRYPTOAGENTS_API_URL",
        "CRYPTOAGENTS_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    set_gate(None)
    set_metrics(None)
    yield
    set_gate(None)
    set_metrics(None)
    set_default_config(None)


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_is_error(self):
        """Running without a subcommand prints help and fails."""
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_batch_requires_tickers(self):
        """batch needs at least one ticker."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["batch"])


class TestRunCommand:
    """Tests for `run`."""

    def test_run_json(self, capsys):
        """A successful run prints the JSON summary and exits 0."""
        code = main(["run", "btc", "--provider", "static", "--json"])

        assert code == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["ticker"] == "BTC"
        assert data["ok"] is True
        assert data["data_source"] == "live"
        assert data["trend"] == "SIDEWAYS"
        assert data["action"] == "HOLD"
        assert set(data["summaries"]) == {"ANALYST", "RISK_MANAGER", "TRADER"}

    def test_run_human(self, capsys):
        """Human output lists the decision and each agent's summary."""
        code = main(["run", "ETH", "--provider", "static"])

        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert "ticker: ETH" in out
        assert "action: SELL" in out
        assert "ok: true" in out
        assert "  TRADER: Trading decision: SELL" in out

    def test_run_unavailable_ticker(self, capsys):
        """An aborted run exits 1 with the structured error."""
        code = main(["run", "NOPE", "--provider", "static", "--json"])

        assert code == EXIT_RUNTIME_ERROR
        data = json.loads(capsys.readouterr().out)
        assert data["ok"] is False
        assert data["error"]["code"] == "DATA_UNAVAILABLE"


class TestBatchCommand:
    """Tests for `batch`."""

    def test_batch_all_ok(self, capsys):
        """All tickers succeeding exits 0."""
        code = main(["batch", "BTC", "ETH", "--provider", "static", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_SUCCESS
        assert data["total"] == 2
        assert [r["ticker"] for r in data["reports"]] == ["BTC", "ETH"]

    def test_batch_partial_failure(self, capsys):
        """Any failed ticker exits 2 while the others still report."""
        code = main(["batch", "BTC", "NOPE", "--provider", "static", "--max-workers", "1", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_ANALYSIS_FAILED
        assert data["successful"] == 1
        assert data["failed"] == 1
        failed = next(r for r in data["reports"] if not r["ok"])
        assert failed["errors"][0].startswith("Orchestration failed: ")

    def test_batch_human_footer(self, capsys):
        """Human output ends with a success count."""
        main(["batch", "BTC", "SOL", "--provider", "static"])

        assert "2/2 tickers analyzed successfully" in capsys.readouterr().out


class TestAgentsCommand:
    """Tests for `agents`."""

    def test_agents_json(self, capsys):
        """Built-in agents are listed in execution order."""
        code = main(["agents", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_SUCCESS
        assert [a["name"] for a in data][:3] == ["ANALYST", "RISK_MANAGER", "TRADER"]
        assert data[2]["requires"] == ["ANALYST", "RISK_MANAGER"]

    def test_agents_human(self, capsys):
        """Human output shows priority and dependencies."""
        main(["agents"])

        out = capsys.readouterr().out
        assert "ANALYST (v1) [priority=1]" in out
        assert "requires: ANALYST" in out


class TestConfigCommand:
    """Tests for `config`."""

    def test_init_creates_file(self, tmp_path):
        """--init writes the template once."""
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (tmp_path / "cryptoagents.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show(self, capsys):
        """--show prints CLI and runtime settings."""
        assert main(["config", "--show"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["cli"]["default_output_format"] == "human"
        assert data["runtime"]["resilience"]["failure_threshold"] == 5


class FakeClient:
    """Stands in for HttpClient against a running API."""

    payloads = {
        "/metrics": {
            "ok": True,
            "metrics": {
                "total_requests": 4,
                "successful_runs": 3,
                "failed_runs": 1,
                "success_rate": 75.0,
                "failure_rate": 25.0,
                "average_execution_time_ms": 12.5,
                "agent_metrics": {
                    "ANALYST": {
                        "execution_count": 4,
                        "failure_count": 0,
                        "failure_rate": 0.0,
                        "average_execution_time_ms": 2.0,
                    },
                },
                "uptime_ms": 5000.0,
                "last_reset_time": "2026-01-01 00:00:00",
            },
        },
        "/resilience": {
            "ok": True,
            "circuit_state": "CLOSED",
            "failure_count": 0,
            "emergency_cache_size": 2,
            "last_failure_time": None,
        },
    }

    def __init__(self, timeout=10.0):
        self.calls = []

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def request(self, method, url, **kwargs):
        from core.http import HttpResponse

        self.calls.append((method, url))
        path = url.split("8000", 1)[1]
        key = "/metrics" if path == "/metrics/reset" else path
        return HttpResponse(status_code=200, content=json.dumps(self.payloads[key]).encode(), url=url)

    def get(self, url, **kwargs):
        return self.request("GET", url)

    def post(self, url, **kwargs):
        return self.request("POST", url)


class TestMetricsCommand:
    """Tests for `metrics`."""

    def test_metrics_human(self, monkeypatch, capsys):
        """Metrics and gate status from the API are printed."""
        monkeypatch.setattr(status, "HttpClient", FakeClient)

        code = main(["metrics", "--url", "http://localhost:8000"])

        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert "success_rate: 75.00%" in out
        assert "ANALYST: 4 runs" in out
        assert "circuit: CLOSED" in out

    def test_metrics_json(self, monkeypatch, capsys):
        """--json prints both sections."""
        monkeypatch.setattr(status, "HttpClient", FakeClient)

        main(["metrics", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["metrics"]["total_requests"] == 4
        assert data["resilience"] == {
            "circuit_state": "CLOSED",
            "failure_count": 0,
            "emergency_cache_size": 2,
            "last_failure_time": None,
        }

    def test_reset_posts(self):
        """--reset uses POST /metrics/reset."""
        client = FakeClient()

        status.fetch_status(client, "http://localhost:8000/", reset=True)

        assert client.calls[0] == ("POST", "http://localhost:8000/metrics/reset")

    def test_unreachable_api(self, capsys):
        """A connection failure exits 1."""
        code = main(["metrics", "--url", "http://127.0.0.1:9", "--timeout", "0.5"])

        assert code == EXIT_RUNTIME_ERROR
        assert "cannot reach API" in capsys.readouterr().err
