"""
CLI Commands Package

Contains implementations for CLI subcommands.
"""

from . import analyze, status

__all__ = ["analyze", "status"]
