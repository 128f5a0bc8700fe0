"""
Schemas - Errors

Purpose: Standard error taxonomy across the analysis pipeline.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Input Errors
    INVALID_INPUT = "INVALID_INPUT"

    # Data Acquisition Errors
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"

    # Agent Errors
    UNKNOWN_AGENT = "UNKNOWN_AGENT"
    AGENT_ANALYSIS_FAILED = "AGENT_ANALYSIS_FAILED"
    STEP_PRODUCED_NOTHING = "STEP_PRODUCED_NOTHING"
    STEP_UNEXPECTED = "STEP_UNEXPECTED"
    NO_RESULTS = "NO_RESULTS"

    # Catch-all
    INTERNAL_ERROR = "INTERNAL_ERROR"


class OrchestrationReason(str, Enum):
    """Why a run was aborted by the pipeline."""
    INVALID_INPUT = ErrorCodes.INVALID_INPUT
    DATA_UNAVAILABLE = ErrorCodes.DATA_UNAVAILABLE
    STEP_PRODUCED_NOTHING = ErrorCodes.STEP_PRODUCED_NOTHING
    STEP_UNEXPECTED = ErrorCodes.STEP_UNEXPECTED
    NO_RESULTS = ErrorCodes.NO_RESULTS


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class CryptoAgentsError(BaseModel):
    """
    Base error model for structured error communication.

    Used when errors cross a transport boundary (API responses, CLI JSON
    output) instead of being raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DATA_UNAVAILABLE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "CryptoAgentsException":
        """Convert this error model to a raised exception."""
        return CryptoAgentsException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CryptoAgentsException(Exception):
    """
    Base exception for all pipeline errors.

    Carries structured error information and can be converted
    to/from CryptoAgentsError models.
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> CryptoAgentsError:
        """Convert this exception to a CryptoAgentsError model."""
        return CryptoAgentsError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputException(CryptoAgentsException, ValueError):
    """Raised when a request is rejected before any work begins."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=details,
            retryable=False,
        )


class UnknownAgentException(CryptoAgentsException, LookupError):
    """Raised when an agent name cannot be resolved by the registry."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(
            message=f"Unknown agent name: {agent_name}",
            code=ErrorCodes.UNKNOWN_AGENT,
            details={"agent_name": agent_name},
            retryable=False,
        )
        self.agent_name = agent_name


class AgentAnalysisException(CryptoAgentsException):
    """
    Declared, expected failure raised by an agent.

    The pipeline records it in the run report and moves on to the next
    agent. Anything else an agent raises aborts the run.
    """

    def __init__(
        self,
        agent_name: str,
        ticker: str | None,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["agent_name"] = agent_name
        if ticker:
            full_details["ticker"] = ticker
        super().__init__(
            message=message,
            code=ErrorCodes.AGENT_ANALYSIS_FAILED,
            details=full_details,
            retryable=False,
        )
        self.agent_name = agent_name
        self.ticker = ticker


class SourceUnavailableException(CryptoAgentsException):
    """Raised by a market data provider when the upstream call fails."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if source:
            full_details["source"] = source
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.SOURCE_UNAVAILABLE,
            details=full_details,
            retryable=True,
        )


class OrchestrationException(CryptoAgentsException):
    """
    Hard failure that aborts a whole pipeline run.

    The code is the reason value, so API and CLI callers can branch on it
    without importing the enum.
    """

    def __init__(
        self,
        reason: OrchestrationReason,
        ticker: str | None,
        stage: str,
        message: str,
        *,
        operation_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        op = f" [{operation_id}]" if operation_id else ""
        full_message = (
            f"Orchestration failed for ticker '{ticker}' at stage '{stage}'{op}: {message}"
        )
        details: dict[str, Any] = {
            "reason": reason.value,
            "ticker": ticker,
            "stage": stage,
        }
        if operation_id:
            details["operation_id"] = operation_id
        if cause is not None:
            details["cause"] = type(cause).__name__
        super().__init__(
            message=full_message,
            code=reason.value,
            details=details,
            retryable=reason == OrchestrationReason.DATA_UNAVAILABLE,
        )
        self.reason = reason
        self.ticker = ticker
        self.stage = stage
        self.operation_id = operation_id
        self.cause = cause
