"""API route handlers."""

from api.routes import analysis, health, metrics

__all__ = ["analysis", "health", "metrics"]
