"""
Tests for the built-in agents

ANALYST -> RISK_MANAGER -> TRADER over deterministic price bands.
"""

import pytest

from agents import AnalystAgent, RiskManagerAgent, TraderAgent
from agents.risk_manager.agent import assess_risk
from agents.trader.agent import decide, urgency
from core.schemas.analysis import (
    AnalysisStatus,
    MarketTrend,
    OrderType,
    RiskLevel,
    SignalStrength,
    StepResult,
    TradingAction,
)
from core.schemas.errors import AgentAnalysisException

from fixtures import make_context, make_history


def _run_chain(price: float, ticker: str = "BTC"):
    ctx = make_context(ticker, price)
    for agent in (AnalystAgent(), RiskManagerAgent(), TraderAgent()):
        ctx.add_result(agent.name, agent.run(ctx))
    return ctx


class TestAnalystAgent:
    """Tests for the analyst."""

    @pytest.mark.parametrize(
        "price,trend,signal,confidence",
        [
            (55000.0, MarketTrend.BULLISH, SignalStrength.STRONG_BUY, 0.75),
            (40000.0, MarketTrend.SIDEWAYS, SignalStrength.NEUTRAL, 0.60),
            (3000.0, MarketTrend.BEARISH, SignalStrength.STRONG_SELL, 0.80),
        ],
    )
    def test_price_bands(self, price, trend, signal, confidence):
        """Trend, signal and confidence follow the price band."""
        report = AnalystAgent().run(make_context("X", price))

        assert report.market_trend == trend
        assert report.signal_strength == signal
        assert report.confidence_score == confidence

    def test_levels_and_stamping(self, frozen_clock):
        """Levels are derived from the price; run() stamps the result."""
        report = AnalystAgent().run(make_context("BTC", 100.0, clock=frozen_clock))

        assert report.support_level == pytest.approx(90.0)
        assert report.resistance_level == pytest.approx(110.0)
        assert report.price_target == pytest.approx(115.0)
        assert report.agent_name == "ANALYST"
        assert report.ticker == "BTC"
        assert report.status == AnalysisStatus.COMPLETED
        assert report.analysis_time == frozen_clock.now()

    def test_indicators_without_history(self):
        """Without history a synthetic SMA line is produced."""
        report = AnalystAgent().run(make_context("BTC", 100.0))

        assert report.technical_indicators == "SMA_50: 95.00"

    def test_indicators_from_history(self):
        """A historical series drives the indicator line."""
        ctx = make_context("BTC", 110.0, historical_data=make_history("BTC", (100.0, 110.0), days=2))

        report = AnalystAgent().run(ctx)

        assert "SMA_2: 105.00" in report.technical_indicators
        assert "Change: +10.00%" in report.technical_indicators

    def test_cannot_run_on_blank_ticker(self):
        """A blank ticker makes the agent unable to run."""
        ctx = make_context()
        ctx.ticker = " "

        assert AnalystAgent().can_run(ctx) is False
        with pytest.raises(AgentAnalysisException):
            AnalystAgent().run(ctx)


class TestRiskManagerAgent:
    """Tests for the risk manager."""

    def test_requires_analyst(self):
        """Without an analyst result the risk manager cannot run."""
        assert RiskManagerAgent().can_run(make_context()) is False

    def test_bullish_moderate(self):
        """Confident bullish view below 60k is moderate risk with a 5% position."""
        ctx = _run_chain(55000.0)
        risk = ctx.get_result("RISK_MANAGER")

        assert risk.risk_level == RiskLevel.MODERATE
        assert risk.risk_score == 0.6
        assert risk.recommended_position_size == 0.05
        assert risk.volatility_score == 0.8
        assert risk.stop_loss_level == pytest.approx(52250.0)
        assert risk.confidence_score == 0.75

    def test_non_analyst_result_is_declared_failure(self):
        """A foreign result under the ANALYST key is an analysis failure."""
        ctx = make_context(results={"ANALYST": StepResult(result_summary="fake")})

        with pytest.raises(AgentAnalysisException):
            RiskManagerAgent().run(ctx)

    @pytest.mark.parametrize(
        "trend,confidence,price,level",
        [
            (MarketTrend.BULLISH, 0.75, 70000.0, RiskLevel.HIGH),
            (MarketTrend.BULLISH, 0.60, 55000.0, RiskLevel.HIGH),
            (MarketTrend.BEARISH, 0.80, 3000.0, RiskLevel.LOW),
            (MarketTrend.BEARISH, 0.50, 3000.0, RiskLevel.MODERATE),
            (MarketTrend.SIDEWAYS, 0.60, 40000.0, RiskLevel.LOW),
        ],
    )
    def test_assess_risk_table(self, trend, confidence, price, level):
        """assess_risk covers every trend branch."""
        assert assess_risk(trend, confidence, price)[0] == level


class TestTraderAgent:
    """Tests for the trader."""

    def test_bullish_buy(self):
        """Moderate-risk bullish view buys 70% of the allowed position."""
        ctx = _run_chain(55000.0)
        trade = ctx.get_result("TRADER")

        assert trade.action == TradingAction.BUY
        assert trade.position_size == pytest.approx(0.035)
        assert trade.order_type == OrderType.MARKET
        assert trade.entry_price == 55000.0
        assert trade.take_profit == pytest.approx(63250.0)
        assert trade.urgency_level == 1
        assert trade.result_summary.startswith("Trading decision: BUY (3.5% position)")

    def test_bearish_sell(self):
        """Bearish view sells the whole position at market."""
        trade = _run_chain(3000.0, "ETH").get_result("TRADER")

        assert trade.action == TradingAction.SELL
        assert trade.position_size == 1.0
        assert trade.exit_price == 3000.0
        assert trade.entry_price is None

    def test_sideways_hold(self):
        """Sideways, low-risk view holds."""
        trade = _run_chain(40000.0).get_result("TRADER")

        assert trade.action == TradingAction.HOLD
        assert trade.order_type is None

    def test_high_risk_bullish_waits(self):
        """Bullish view at an elevated price is rejected."""
        trade = _run_chain(70000.0).get_result("TRADER")

        assert trade.action == TradingAction.WAIT
        assert trade.position_size == 0.0

    def test_requires_both_results(self):
        """The trader needs analyst and risk results."""
        ctx = make_context()
        ctx.add_result("ANALYST", AnalystAgent().run(ctx))

        assert TraderAgent().can_run(ctx) is False

    def test_decision_helpers(self):
        """decide and urgency cover the remaining branches."""
        assert decide(MarketTrend.BULLISH, RiskLevel.LOW, 0.1) == (
            TradingAction.BUY, 0.1, "Strong bullish signal with manageable risk",
        )
        assert decide(MarketTrend.SIDEWAYS, RiskLevel.HIGH, 0.0)[:2] == (TradingAction.SELL, 0.5)
        assert urgency(TradingAction.SELL, RiskLevel.HIGH) == 3
        assert urgency(TradingAction.BUY, RiskLevel.LOW) == 2
        assert urgency(TradingAction.HOLD, RiskLevel.LOW) == 1
