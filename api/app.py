"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import init_config
from api.errors import APIError, api_error_handler, domain_error_handler, generic_error_handler
from api.routes import analysis, health, metrics
from core.schemas.errors import CryptoAgentsException


# Configure logging; CRYPTOAGENTS_LOG_LEVEL wins over the config file
def _resolve_log_level() -> int:
    """Resolve log level from env var or the loaded config, defaulting to INFO."""
    config = init_config()
    raw = os.getenv("CRYPTOAGENTS_LOG_LEVEL") or config.log_level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="CryptoAgents API",
        description="""
HTTP API for multi-agent cryptocurrency analysis.

## Endpoints

- **GET /analyze/{ticker}** / **POST /analyze** - Run the agent pipeline for one ticker
- **POST /analyze/batch** - Run several tickers in parallel
- **GET /agents** - Registered agents in execution order
- **GET /metrics** / **POST /metrics/reset** - Run metrics
- **GET /resilience** - Circuit breaker and emergency cache status
- **GET /health** - Health and readiness check

## Failure semantics

A single-ticker request fails with 400 for an empty ticker, 503 when no
market data (live or fallback) is available, and 500 when an agent
produces nothing or fails unexpectedly. Batch requests always return one
report per ticker.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(CryptoAgentsException, domain_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(analysis.router)
    app.include_router(metrics.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
