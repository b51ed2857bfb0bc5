"""
Consistent error handling for the listing portal.

All API errors MUST use these standard error classes and shapes.
Stack traces are NEVER returned to clients.

Standard HTTP status codes:
- 204: No Content (guarded route while identity is still resolving)
- 303: See Other (guarded route denied; redirect to the seller hub)
- 500: Internal Server Error
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base application error with consistent error shape.

    All custom errors should inherit from this class.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to API error response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ListingAccessDenied(AppError):
    """Guarded listing route denied (303 to the landing route)."""

    def __init__(self, location: str, kind: str, category: Optional[str] = None):
        super().__init__(
            code="LISTING_ACCESS_DENIED",
            message="Listing access denied",
            status_code=status.HTTP_303_SEE_OTHER,
            details={"kind": kind, "category": category},
        )
        self.location = location


class ListingAccessPending(AppError):
    """Identity still resolving for a guarded route (204, nothing rendered)."""

    def __init__(self, retry_after: int = 1):
        super().__init__(
            code="IDENTITY_PENDING",
            message="Identity resolution in progress",
            status_code=status.HTTP_204_NO_CONTENT,
            details={"retry_after_seconds": retry_after},
        )
        self.retry_after = retry_after


class PortalApiError(Exception):
    """Raised when a portal API call fails at the transport or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id(request: Request) -> str:
    """X-Correlation-ID header, else request state, else a new id."""
    correlation_id = request.headers.get("X-Correlation-ID")
    if correlation_id:
        return correlation_id
    if hasattr(request.state, "correlation_id"):
        return request.state.correlation_id
    return generate_correlation_id()


def _error_response(status_code: int, body: dict, correlation_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={"X-Correlation-ID": correlation_id},
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Outermost middleware: tags every response with a correlation id and turns
    escaped exceptions into the standard error body.

    Guard outcomes never reach this point; their exception handlers answer
    first. Stack traces are NEVER returned to clients.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = get_correlation_id(request)
        request.state.correlation_id = correlation_id
        log_context = {
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
        }

        try:
            response = await call_next(request)
        except AppError as e:
            logger.warning(
                "Application error",
                extra={**log_context, "error_code": e.code, "status_code": e.status_code},
            )
            return _error_response(e.status_code, e.to_dict(), correlation_id)
        except Exception as e:
            logger.exception("Unhandled exception", extra={**log_context, "error_type": type(e).__name__})
            body = {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "details": {"correlation_id": correlation_id},
                }
            }
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, body, correlation_id)

        response.headers["X-Correlation-ID"] = correlation_id
        return response
