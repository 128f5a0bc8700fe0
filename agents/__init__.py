"""
Agents Module

Pipeline agents, the run context they read from, and the registry that
orders them. Importing this package registers the built-in agents:

- ANALYST (priority 1): trend, signal and price levels
- RISK_MANAGER (priority 2): risk level, position size and stop loss
- TRADER (priority 3): final trading decision
"""

from .base import Agent, AgentFactory, AgentStep, BaseAgent
from .context import Clock, FrozenClock, RealClock, RunContext
from .registry import AgentEntry, AgentRegistry, get_registry, register_agent

# Built-in agents (auto-register on import)
from .analyst import AnalystAgent
from .risk_manager import RiskManagerAgent
from .trader import TraderAgent

__all__ = [
    # Base
    "Agent",
    "AgentFactory",
    "AgentStep",
    "BaseAgent",
    # Context
    "Clock",
    "FrozenClock",
    "RealClock",
    "RunContext",
    # Registry
    "AgentEntry",
    "AgentRegistry",
    "get_registry",
    "register_agent",
    # Built-in agents
    "AnalystAgent",
    "RiskManagerAgent",
    "TraderAgent",
]
