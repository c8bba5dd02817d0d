"""
Shared exception classes and error handling utilities for Vitals Service API.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error response formatting
- Exception handlers for FastAPI integration

"No data yet" is deliberately absent from this hierarchy: the analytics
engine reports an empty record set as None / [] / a placeholder series,
never as an exception.

Usage:
    from core.exceptions import RecordNotFoundError, NotAuthenticatedError

    # In service layer - raise domain exceptions
    raise RecordNotFoundError(record_id="abc123")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class VitalsServiceError(Exception):
    """
    Base exception for all Vitals Service domain errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with status code and detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in error response.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# OWNER / AUTH EXCEPTIONS
# =============================================================================

class NotAuthenticatedError(VitalsServiceError):
    """Raised when an operation needs an owner and none was supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "User not authenticated"


# =============================================================================
# RECORD EXCEPTIONS
# =============================================================================

class RecordNotFoundError(VitalsServiceError):
    """Raised when a vital record id is absent for the owner."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Vital record not found"

    def __init__(self, record_id: Optional[str] = None, **kwargs: Any):
        detail = f"Vital record '{record_id}' not found" if record_id else self.detail
        super().__init__(detail=detail, record_id=record_id, **kwargs)


class InvalidRecordDataError(VitalsServiceError):
    """Raised when record data fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid record data"


# =============================================================================
# SHARED REPORT EXCEPTIONS
# =============================================================================

class SharedReportNotFoundError(VitalsServiceError):
    """
    Raised when a shared report does not exist or has expired.

    Expired reports are reported exactly like missing ones so a reader
    cannot tell whether an id ever existed.
    """

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Shared report not found"

    def __init__(self, report_id: Optional[str] = None, **kwargs: Any):
        detail = f"Shared report '{report_id}' not found" if report_id else self.detail
        super().__init__(detail=detail, report_id=report_id, **kwargs)


# =============================================================================
# ANALYTICS INPUT EXCEPTIONS
# =============================================================================

class InvalidWindowError(VitalsServiceError):
    """Raised when a date-range window selector cannot be parsed."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid window selector"

    def __init__(self, window: Any = None, **kwargs: Any):
        detail = (
            f"Invalid window '{window}': use 'all' or a non-negative number of days"
            if window is not None else self.detail
        )
        super().__init__(detail=detail, window=str(window), **kwargs)


class UnknownVitalTypeError(VitalsServiceError):
    """Raised when a vital type name does not resolve in the vital registry."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Unknown vital type"

    def __init__(self, vital_type: Optional[str] = None, **kwargs: Any):
        detail = f"Unknown vital type '{vital_type}'" if vital_type else self.detail
        super().__init__(detail=detail, vital_type=vital_type, **kwargs)


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(VitalsServiceError):
    """Raised when a database operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def vitals_service_exception_handler(
    request: Request,
    exc: VitalsServiceError
) -> JSONResponse:
    """
    Handle VitalsServiceError exceptions and return consistent JSON responses.

    This handler logs the error and returns a standardized JSON error response.
    """
    logger.warning(
        f"VitalsServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "ApiKey"}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Call this function during app initialization to enable consistent
    error handling across all endpoints.

    Args:
        app: The FastAPI application instance.

    Example:
        app = FastAPI()
        setup_exception_handlers(app)
    """
    app.add_exception_handler(VitalsServiceError, vitals_service_exception_handler)
