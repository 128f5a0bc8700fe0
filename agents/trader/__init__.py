"""
Trader Agent Module

Usage:
    from agents.trader import TraderAgent

    decision = TraderAgent().run(ctx)
"""

from .agent import TraderAgent, decide, urgency

__all__ = [
    "TraderAgent",
    "decide",
    "urgency",
]
