"""FastAPI routes and API modules for SRM Ops.

Provides the error envelope, the APIError hierarchy and exception handlers.
"""

from typing import Any
from uuid import UUID

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

# =========================
# Response Models
# =========================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    error: str
    error_code: str
    details: list[ErrorDetail] | None = None


# =========================
# Exception Classes
# =========================


class APIError(HTTPException):
    """Base API error with structured response."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: list[ErrorDetail] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message, headers=headers)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: str | UUID):
        super().__init__(
            status_code=404,
            error_code="NOT_FOUND",
            message=f"{resource} not found: {identifier}",
        )


class ValidationError(APIError):
    """Request validation error."""

    def __init__(self, message: str, details: list[ErrorDetail] | None = None):
        super().__init__(
            status_code=400,
            error_code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class AuthenticationError(APIError):
    """Authentication required error."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            status_code=401,
            error_code="AUTHENTICATION_REQUIRED",
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(APIError):
    """Authorization denied error."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            status_code=403,
            error_code="ACCESS_DENIED",
            message=message,
        )


class RateLimitError(APIError):
    """Daily submission limit reached."""

    def __init__(self, limit: int):
        super().__init__(
            status_code=429,
            error_code="RATE_LIMIT_EXCEEDED",
            message=f"Daily limit of {limit} submissions reached",
        )
        self.limit = limit


class PayloadTooLargeError(APIError):
    """Request or upload body over the configured size."""

    def __init__(self, max_bytes: int):
        super().__init__(
            status_code=413,
            error_code="PAYLOAD_TOO_LARGE",
            message=f"Payload exceeds {max_bytes} bytes",
        )
        self.max_bytes = max_bytes


# =========================
# Exception Handlers
# =========================


def error_response(exc: APIError) -> JSONResponse:
    headers = {"X-Error-Code": exc.error_code}
    if exc.headers:
        headers.update(exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.message,
            error_code=exc.error_code,
            details=exc.details,
        ).model_dump(exclude_none=True),
        headers=headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return error_response(exc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle generic HTTPException (unknown routes, wrong methods)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            error_code="HTTP_ERROR",
        ).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query" prefix FastAPI puts in front of the field path
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map payload validation failures to 400 with the offending field names."""
    details = [
        ErrorDetail(
            code=error.get("type", "invalid"),
            message=error.get("msg", "Invalid value"),
            field=_field_name(tuple(error.get("loc", ()))),
        )
        for error in exc.errors()
    ]
    fields = sorted({d.field for d in details if d.field})
    message = "Invalid request"
    if fields:
        message = f"Invalid or missing fields: {', '.join(fields)}"
    return error_response(ValidationError(message, details=details))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    from srmops.logging import get_logger

    logger = get_logger(__name__)
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="An unexpected error occurred",
            error_code="INTERNAL_ERROR",
        ).model_dump(exclude_none=True),
    )


def register_exception_handlers(app):
    """Register exception handlers with the FastAPI app."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
