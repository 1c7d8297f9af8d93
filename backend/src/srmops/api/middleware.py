"""API middleware for request tracing, size limits and security headers."""

import time
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ..config import get_settings
from ..logging import get_context_logger, log_api_request
from . import PayloadTooLargeError, error_response

logger = get_context_logger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body size exceeds ``max_request_bytes``."""

    def __init__(self, app, max_bytes: int | None = None):
        super().__init__(app)
        self._max_bytes = max_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        max_bytes = self._max_bytes or get_settings().max_request_bytes
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > max_bytes:
                logger.warning(
                    "request_too_large",
                    extra={
                        "path": request.url.path,
                        "content_length": int(content_length),
                    },
                )
                return error_response(PayloadTooLargeError(max_bytes))
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # HSTS (only in production with HTTPS)
        if get_settings().is_production:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add request ID to request state and response headers.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response with request ID header
        """
        # Check for existing request ID from client
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        log_api_request(
            request.method,
            request.url.path,
            response.status_code,
            round(duration_ms, 2),
            user_id=getattr(request.state, "user_id", None),
            request_id=request_id,
        )
        return response


def setup_middleware(app) -> None:
    """Configure all middleware for the FastAPI application.

    Starlette runs the last added middleware first.
    """
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(RequestIdMiddleware)

    logger.info("API middleware configured")
