"""
HTTP Client Module

Requests-based HTTP client shared by market data providers.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
