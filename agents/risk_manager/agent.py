"""
Risk Manager Agent

Second step of the pipeline. Turns the analyst's trend and confidence into
a risk level, a maximum position size and a stop loss.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agents.base import AgentStep, BaseAgent
from agents.registry import register_agent
from core.schemas.analysis import AnalystReport, MarketTrend, RiskAssessment, RiskLevel
from core.schemas.errors import AgentAnalysisException

if TYPE_CHECKING:
    from agents.context import RunContext


logger = logging.getLogger(__name__)


STOP_LOSS_FACTOR = 0.95

# Maximum position share for a bullish trend, by risk level
BULLISH_POSITION_SIZES: dict[RiskLevel, float] = {
    RiskLevel.LOW: 0.10,
    RiskLevel.MODERATE: 0.05,
    RiskLevel.HIGH: 0.02,
}


def assess_risk(trend: MarketTrend, confidence: float, price: float) -> tuple[RiskLevel, float, str]:
    """Risk level, score and summary for an analyst view at a price."""
    if trend == MarketTrend.BULLISH:
        if confidence > 0.7 and price < 60000:
            return RiskLevel.MODERATE, 0.6, "Moderate risk - strong bullish signal but consider market volatility"
        if confidence > 0.7:
            return RiskLevel.HIGH, 0.8, "High risk - buying at elevated prices"
        return RiskLevel.HIGH, 0.75, "High risk - low confidence bullish signal"

    if trend == MarketTrend.BEARISH:
        if confidence > 0.7:
            return RiskLevel.LOW, 0.3, "Low risk - strong bearish signal protects capital"
        return RiskLevel.MODERATE, 0.5, "Moderate risk - uncertain bearish signal"

    return RiskLevel.LOW, 0.4, "Low risk - maintaining current position"


class RiskManagerAgent(BaseAgent):
    """Risk assessment on top of the analyst report."""

    _name = AgentStep.RISK_MANAGER.value
    _version = "v1"
    _priority = 2
    _requires = (AgentStep.ANALYST.value,)

    def analyze(self, ctx: "RunContext") -> RiskAssessment:
        logger.info(f"Risk manager assessing {ctx.ticker}")
        analyst = self._require_result(ctx, AgentStep.ANALYST.value)
        if not isinstance(analyst, AnalystReport):
            raise AgentAnalysisException(
                self.name, ctx.ticker, "No analyst report available for risk assessment"
            )

        price = ctx.market_data.current_price
        level, score, summary = assess_risk(analyst.market_trend, analyst.confidence_score, price)

        position = 0.0
        if analyst.market_trend == MarketTrend.BULLISH:
            position = BULLISH_POSITION_SIZES[level]

        assessment = RiskAssessment(
            risk_level=level,
            risk_score=score,
            volatility_score=0.8 if price > 50000 else 0.5,
            recommended_position_size=position,
            stop_loss_level=price * STOP_LOSS_FACTOR,
            confidence_score=analyst.confidence_score,
            result_summary=summary,
            analysis_time=ctx.clock.now(),
        )
        logger.info(f"Risk manager completed {ctx.ticker} with risk level: {level.value}")
        return assessment


def _register_agents() -> None:
    """Register the risk manager agent."""
    register_agent(
        AgentStep.RISK_MANAGER.value,
        RiskManagerAgent,
        priority=RiskManagerAgent._priority,
        metadata={
            "description": "Risk level, position size and 5% stop loss from the analyst view.",
            "requires": list(RiskManagerAgent._requires),
        },
    )


# Auto-register on import
_register_agents()
