"""
CryptoAgents HTTP API (FastAPI)

Thin HTTP adapter over the orchestrator:
- GET /analyze/{ticker}, POST /analyze - Single-ticker analysis
- POST /analyze/batch - Parallel analysis
- GET /metrics, POST /metrics/reset - Run metrics
- GET /resilience - Gate status
- GET /agents - Registered agents
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
