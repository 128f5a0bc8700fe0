"""
CryptoAgents CLI

Command-line interface for multi-agent cryptocurrency analysis.

Usage:
    python -m cryptoagents_cli run BTC
    python -m cryptoagents_cli batch BTC ETH SOL
    python -m cryptoagents_cli agents
    python -m cryptoagents_cli metrics --url http://localhost:8000
    python -m cryptoagents_cli config --show
"""

__version__ = "0.1.0"
