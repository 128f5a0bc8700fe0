"""
API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import (
    CryptoAgentsException,
    ErrorCodes,
    OrchestrationException,
    OrchestrationReason,
)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class DataUnavailableError(APIError):
    """No market data, live or fallback."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.DATA_UNAVAILABLE,
            message=message,
            status_code=503,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


def from_domain_error(exc: CryptoAgentsException) -> APIError:
    """Map a domain exception onto the API error hierarchy."""
    if isinstance(exc, OrchestrationException):
        if exc.reason == OrchestrationReason.INVALID_INPUT:
            return InvalidRequestError(exc.message, details=exc.details)
        if exc.reason == OrchestrationReason.DATA_UNAVAILABLE:
            return DataUnavailableError(exc.message, details=exc.details)
        return APIError(code=exc.code, message=exc.message, status_code=500, details=exc.details)

    if exc.code == ErrorCodes.INVALID_INPUT:
        return InvalidRequestError(exc.message, details=exc.details)
    return InternalError(exc.message, details=exc.details)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def domain_error_handler(request: Request, exc: CryptoAgentsException) -> JSONResponse:
    """Handle domain exceptions that escaped a route."""
    return await api_error_handler(request, from_domain_error(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
