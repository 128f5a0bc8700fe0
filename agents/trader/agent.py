"""
Trader Agent

Last step of the pipeline. Combines the analyst trend with the risk
assessment into an actionable decision: action, position size, order
details and urgency.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agents.base import AgentStep, BaseAgent
from agents.registry import register_agent
from core.schemas.analysis import (
    AnalystReport,
    MarketTrend,
    OrderType,
    RiskAssessment,
    RiskLevel,
    TradeDecision,
    TradingAction,
)
from core.schemas.errors import AgentAnalysisException

if TYPE_CHECKING:
    from agents.context import RunContext


logger = logging.getLogger(__name__)


TAKE_PROFIT_FACTOR = 1.15


def decide(trend: MarketTrend, risk: RiskLevel, max_position: float) -> tuple[TradingAction, float, str]:
    """Action, position size and rationale for a trend under a risk level."""
    if trend == MarketTrend.BULLISH:
        if risk == RiskLevel.LOW:
            return TradingAction.BUY, max_position, "Strong bullish signal with manageable risk"
        if risk == RiskLevel.MODERATE:
            return (
                TradingAction.BUY,
                max_position * 0.7,
                "Bullish signal but reduced position due to moderate risk",
            )
        return TradingAction.WAIT, 0.0, "Bullish signal rejected due to high risk level"

    if trend == MarketTrend.BEARISH:
        return TradingAction.SELL, 1.0, "Bearish signal confirmed by risk assessment"

    if risk == RiskLevel.HIGH:
        return TradingAction.SELL, 0.5, "High risk detected, reducing exposure"
    return TradingAction.HOLD, 0.0, "Maintain current position"


def urgency(action: TradingAction, risk: RiskLevel) -> int:
    """1 (low) to 3 (high)."""
    if risk == RiskLevel.HIGH and action == TradingAction.SELL:
        return 3
    if risk == RiskLevel.LOW and action == TradingAction.BUY:
        return 2
    return 1


class TraderAgent(BaseAgent):
    """Trading decision from the analyst and risk manager results."""

    _name = AgentStep.TRADER.value
    _version = "v1"
    _priority = 3
    _requires = (AgentStep.ANALYST.value, AgentStep.RISK_MANAGER.value)

    def analyze(self, ctx: "RunContext") -> TradeDecision:
        logger.info(f"Trader making trading decision for {ctx.ticker}")
        analyst = self._require_result(ctx, AgentStep.ANALYST.value)
        risk = self._require_result(ctx, AgentStep.RISK_MANAGER.value)
        if not isinstance(analyst, AnalystReport) or not isinstance(risk, RiskAssessment):
            raise AgentAnalysisException(
                self.name, ctx.ticker, "Missing required reports for trading decision"
            )

        price = ctx.market_data.current_price
        action, size, rationale = decide(
            analyst.market_trend, risk.risk_level, risk.recommended_position_size
        )

        order: dict = {}
        if action == TradingAction.BUY:
            order = {
                "order_type": OrderType.MARKET,
                "entry_price": price,
                "stop_loss": risk.stop_loss_level,
                "take_profit": price * TAKE_PROFIT_FACTOR,
            }
        elif action == TradingAction.SELL:
            order = {"order_type": OrderType.MARKET, "exit_price": price}

        summary = (
            f"Trading decision: {action.value} ({size * 100:.1f}% position) - {rationale}. "
            f"Based on analyst {analyst.market_trend.value.lower()} trend "
            f"({analyst.confidence_score * 100:.0f}% confidence) and "
            f"{risk.risk_level.value.lower()} risk level."
        )

        decision = TradeDecision(
            action=action,
            position_size=size,
            urgency_level=urgency(action, risk.risk_level),
            trading_rationale=rationale,
            result_summary=summary,
            confidence_score=analyst.confidence_score,
            analysis_time=ctx.clock.now(),
            **order,
        )
        logger.info(f"Trader completed {ctx.ticker} with action: {action.value}")
        return decision


def _register_agents() -> None:
    """Register the trader agent."""
    register_agent(
        AgentStep.TRADER.value,
        TraderAgent,
        priority=TraderAgent._priority,
        metadata={
            "description": "Final BUY/SELL/HOLD/WAIT decision with order details and urgency.",
            "requires": list(TraderAgent._requires),
        },
    )


# Auto-register on import
_register_agents()
