"""
Analyst Agent

First step of the pipeline. Reads the market snapshot (and the historical
series when one was acquired) and produces an AnalystReport:

- market trend and signal strength from price bands
- support, resistance and target levels around the current price
- a short technical indicator line
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agents.base import AgentStep, BaseAgent
from agents.registry import register_agent
from core.schemas.analysis import AnalystReport, MarketTrend, SignalStrength

if TYPE_CHECKING:
    from agents.context import RunContext


logger = logging.getLogger(__name__)


# Price bands (quote currency)
BULLISH_ABOVE = 50000.0
SIDEWAYS_ABOVE = 30000.0

SUPPORT_FACTOR = 0.90
RESISTANCE_FACTOR = 1.10
TARGET_FACTOR = 1.15


class AnalystAgent(BaseAgent):
    """
    Price-band technical analyst.

    Deterministic: the same snapshot always yields the same report.
    """

    _name = AgentStep.ANALYST.value
    _version = "v1"
    _priority = 1

    def analyze(self, ctx: "RunContext") -> AnalystReport:
        logger.info(f"Analyst performing technical analysis for {ctx.ticker}")
        price = ctx.market_data.current_price

        if price > BULLISH_ABOVE:
            trend, signal, confidence = MarketTrend.BULLISH, SignalStrength.STRONG_BUY, 0.75
            summary = "Strong bullish trend detected above $50k resistance"
        elif price > SIDEWAYS_ABOVE:
            trend, signal, confidence = MarketTrend.SIDEWAYS, SignalStrength.NEUTRAL, 0.60
            summary = "Consolidation phase, wait for breakout"
        else:
            trend, signal, confidence = MarketTrend.BEARISH, SignalStrength.STRONG_SELL, 0.80
            summary = "Bearish trend, price below key support levels"

        report = AnalystReport(
            market_trend=trend,
            signal_strength=signal,
            confidence_score=confidence,
            result_summary=summary,
            current_price=price,
            support_level=price * SUPPORT_FACTOR,
            resistance_level=price * RESISTANCE_FACTOR,
            price_target=price * TARGET_FACTOR,
            time_horizon_days=30,
            technical_indicators=self._indicators(ctx),
            analysis_time=ctx.clock.now(),
        )
        logger.info(f"Analyst completed {ctx.ticker} with trend: {trend.value}")
        return report

    @staticmethod
    def _indicators(ctx: "RunContext") -> str:
        history = ctx.historical_data
        if history is None or not history.points:
            return f"SMA_50: {ctx.market_data.current_price * 0.95:.2f}"

        parts = [f"SMA_{history.days}: {history.average_price:.2f}"]
        parts.append(f"Range: {history.min_price:.2f}-{history.max_price:.2f}")
        if history.total_change_percentage is not None:
            parts.append(f"Change: {history.total_change_percentage:+.2f}%")
        return ", ".join(parts)


def _register_agents() -> None:
    """Register the analyst agent."""
    register_agent(
        AgentStep.ANALYST.value,
        AnalystAgent,
        priority=AnalystAgent._priority,
        metadata={"description": "Technical analysis from price bands: trend, signal, support/resistance and target."},
    )


# Auto-register on import
_register_agents()
