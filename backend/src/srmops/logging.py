"""Structured logging configuration for SRM Ops.

Provides JSON-formatted logs for production and human-readable
logs for development.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.funcName:
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging() -> None:
    """Configure logging based on settings."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = get_logger(__name__)
    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.environment,
            "log_level": settings.log_level,
            "log_format": settings.log_format,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds context to all log messages."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        """Process the logging message and add extra context."""
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_context_logger(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger with additional context.

    Usage:
        logger = get_context_logger(__name__, user_id="u_123")
        logger.info("Submitting record")  # Includes user_id
    """
    return LoggerAdapter(get_logger(name), context)


# =========================
# Convenience functions
# =========================


def log_record_created(kind: str, record_id: str, user_id: str) -> None:
    """Log the persistence of a new record."""
    logger = get_logger("srmops.records")
    logger.info(
        f"Created {kind} {record_id}",
        extra={
            "kind": kind,
            "record_id": record_id,
            "user_id": user_id,
            "event": "record_created",
        },
    )


def log_record_deleted(kind: str, record_id: str, deleted_by: str) -> None:
    """Log an administrative hard delete."""
    logger = get_logger("srmops.records")
    logger.info(
        f"Deleted {kind} {record_id}",
        extra={
            "kind": kind,
            "record_id": record_id,
            "deleted_by": deleted_by,
            "event": "record_deleted",
        },
    )


def log_notification_result(
    kind: str,
    record_id: str,
    recipients: int,
    delivered: bool,
    error: str | None = None,
) -> None:
    """Log the outcome of a report notification.

    Args:
        kind: Report kind (intervention, reclamation)
        record_id: Record the report was generated for
        recipients: Number of recipient addresses
        delivered: Whether the transport accepted the message
        error: Failure description, if any
    """
    logger = get_logger("srmops.notifications")
    level = logging.INFO if delivered else logging.ERROR
    logger.log(
        level,
        f"Report notification for {kind} {record_id}: "
        f"{'sent' if delivered else 'failed'}",
        extra={
            "kind": kind,
            "record_id": record_id,
            "recipients": recipients,
            "delivered": delivered,
            "error": error,
            "event": "notification_result",
        },
    )


def log_security_event(
    event: str,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Log a security-relevant event (denied access, rejected upload, ...)."""
    logger = get_logger("srmops.security")
    logger.warning(
        f"Security event: {event}",
        extra={
            "security_event": event,
            "user_id": user_id or "anonymous",
            "details": details,
            "event": "security",
        },
    )


def log_api_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    user_id: str | None = None,
    request_id: str | None = None,
) -> None:
    """Log an API request.

    Args:
        method: HTTP method
        path: Request path
        status_code: Response status code
        duration_ms: Request duration in milliseconds
        user_id: Authenticated user ID
        request_id: Request correlation ID
    """
    logger = get_logger("srmops.api")
    logger.info(
        f"{method} {path} - {status_code}",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "user_id": user_id,
            "request_id": request_id,
            "event": "api_request",
        },
    )
