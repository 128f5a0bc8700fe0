"""
Schemas

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    AgentAnalysisException,
    CryptoAgentsError,
    CryptoAgentsException,
    ErrorCodes,
    InvalidInputException,
    OrchestrationException,
    OrchestrationReason,
    SourceUnavailableException,
    UnknownAgentException,
)

# Market data
from .market import (
    DataSource,
    HistoricalSeries,
    MarketSnapshot,
    PricePoint,
)

# Agent results
from .analysis import (
    AnalysisStatus,
    AnalystReport,
    MarketTrend,
    OrderType,
    RiskAssessment,
    RiskLevel,
    SignalStrength,
    StepResult,
    TradeDecision,
    TradingAction,
)

__all__ = [
    # Errors
    "AgentAnalysisException",
    "CryptoAgentsError",
    "CryptoAgentsException",
    "ErrorCodes",
    "InvalidInputException",
    "OrchestrationException",
    "OrchestrationReason",
    "SourceUnavailableException",
    "UnknownAgentException",
    # Market data
    "DataSource",
    "HistoricalSeries",
    "MarketSnapshot",
    "PricePoint",
    # Agent results
    "AnalysisStatus",
    "AnalystReport",
    "MarketTrend",
    "OrderType",
    "RiskAssessment",
    "RiskLevel",
    "SignalStrength",
    "StepResult",
    "TradeDecision",
    "TradingAction",
]
