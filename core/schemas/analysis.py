"""
Schemas - Analysis Results

Purpose: Results produced by pipeline agents.
There is one result kind per pipeline position; all share the StepResult
base fields. Results are frozen: once recorded in a run context, later
agents may read them but never change them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisStatus(str, Enum):
    """Lifecycle status of a step result."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class MarketTrend(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    SIDEWAYS = "SIDEWAYS"
    UNKNOWN = "UNKNOWN"


class SignalStrength(str, Enum):
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    NEUTRAL = "NEUTRAL"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"
    UNKNOWN = "UNKNOWN"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class TradingAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    WAIT = "WAIT"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class StepResult(BaseModel):
    """
    Common fields of every agent result.

    agent_name, ticker, processing_time_ms and status are stamped by
    BaseAgent.run after the agent's own analysis returns.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: str = Field(default="generic", description="Result kind discriminator")
    agent_name: str = Field(default="", description="Name of the producing agent")
    ticker: str = Field(default="", description="Ticker the result refers to")
    analysis_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the analysis was produced",
    )
    result_summary: str = Field(default="", description="Human-readable summary")
    confidence_score: float = Field(
        default=0.0,
        description="Confidence in the result (0.0 to 1.0)",
        ge=0.0,
        le=1.0,
    )
    status: AnalysisStatus = Field(default=AnalysisStatus.PENDING)
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    error_message: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == AnalysisStatus.COMPLETED


class AnalystReport(StepResult):
    """Technical view of the market produced by the ANALYST agent."""

    kind: Literal["analyst"] = "analyst"
    market_trend: MarketTrend = MarketTrend.UNKNOWN
    signal_strength: SignalStrength = SignalStrength.UNKNOWN
    current_price: Optional[float] = None
    support_level: Optional[float] = None
    resistance_level: Optional[float] = None
    price_target: Optional[float] = None
    time_horizon_days: int = 30
    technical_indicators: str = ""


class RiskAssessment(StepResult):
    """Risk view produced by the RISK_MANAGER agent."""

    kind: Literal["risk"] = "risk"
    risk_level: RiskLevel = RiskLevel.MODERATE
    risk_score: float = Field(default=0.5, ge=0.0, le=1.0)
    volatility_score: float = Field(default=0.5, ge=0.0, le=1.0)
    recommended_position_size: float = Field(
        default=0.0,
        description="Maximum share of the portfolio for a new position",
        ge=0.0,
        le=1.0,
    )
    stop_loss_level: Optional[float] = None


class TradeDecision(StepResult):
    """Final trading decision produced by the TRADER agent."""

    kind: Literal["trade"] = "trade"
    action: TradingAction = TradingAction.HOLD
    position_size: float = Field(default=0.0, ge=0.0, le=1.0)
    order_type: Optional[OrderType] = None
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    urgency_level: int = Field(default=1, ge=1, le=3)
    trading_rationale: str = ""
