"""
Test fixtures package.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_context, make_registry

    def test_something():
        ctx = make_context("ETH", 3000.0)
        registry = make_registry(("A", 1), ("B", 2, "fail"))
"""

from .common import (
    ScriptedAgent,
    make_builtin_registry,
    make_context,
    make_history,
    make_registry,
    make_snapshot,
)

__all__ = [
    "ScriptedAgent",
    "make_builtin_registry",
    "make_context",
    "make_history",
    "make_registry",
    "make_snapshot",
]
