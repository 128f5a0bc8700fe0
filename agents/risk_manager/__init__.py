"""
Risk Manager Agent Module

Usage:
    from agents.risk_manager import RiskManagerAgent, assess_risk

    level, score, summary = assess_risk(MarketTrend.BULLISH, 0.75, 55000.0)
"""

from .agent import BULLISH_POSITION_SIZES, RiskManagerAgent, assess_risk

__all__ = [
    "BULLISH_POSITION_SIZES",
    "RiskManagerAgent",
    "assess_risk",
]
