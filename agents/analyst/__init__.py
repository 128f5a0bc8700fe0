"""
Analyst Agent Module

Usage:
    from agents.analyst import AnalystAgent

    report = AnalystAgent().run(ctx)
"""

from .agent import AnalystAgent

__all__ = [
    "AnalystAgent",
]
