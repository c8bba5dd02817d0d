"""
Structured JSON logging for the vitals service.

Every log line is a single JSON object. Besides the usual level, logger and
message, a line carries the identifiers needed to follow one owner's
records through the service:

- ``request_id``: bound by LoggingMiddleware for the whole request
- ``owner_id``: bound by LoggingMiddleware from the X-Owner-Id header
- ``record_id`` / ``report_id``: passed per call through ``extra=``

Identifiers bound to the log context and the ones passed through ``extra=``
both end up as top-level keys, so a log query can filter on
``owner_id`` without digging into ``extra``.

Log Structure (JSON):
{
    "timestamp": "2025-01-15T10:30:00.000Z",
    "level": "INFO",
    "logger": "services.vitals_service",
    "message": "Vital record created: 3f2a...",
    "request_id": "abc-123",
    "owner_id": "owner-123",
    "record_id": "3f2a...",
    "extra": {"window_days": 30}
}

Usage:
    from core.logging_config import setup_logging

    setup_logging()
    logger.info("Vital record created", extra={"record_id": record.id})
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Identifiers lifted out of ``extra`` to the top level of a log line, in output order.
CONTEXT_FIELDS = ("request_id", "owner_id", "record_id", "report_id")

# =============================================================================
# LOG CONTEXT
# =============================================================================

_log_context: ContextVar[Dict[str, str]] = ContextVar("vitals_log_context", default={})


def bind_log_context(**fields: Optional[str]) -> None:
    """Attach identifiers to every log line of the current request/coroutine."""
    context = dict(_log_context.get())
    context.update({key: value for key, value in fields.items() if value})
    _log_context.set(context)


def get_log_context() -> Dict[str, str]:
    """Identifiers bound for the current request/coroutine."""
    return dict(_log_context.get())


def clear_log_context() -> None:
    """Drop all bound identifiers (call at end of request)."""
    _log_context.set({})


# =============================================================================
# JSON FORMATTER
# =============================================================================

# Attributes every LogRecord carries; anything else came from `extra=`.
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message"
}


class VitalsJSONFormatter(logging.Formatter):
    """
    Single-line JSON formatter with owner/record context.

    Identifiers from ``extra=`` win over the bound context, so a log call
    about another owner's record is attributed correctly.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_log_context()
        for key in CONTEXT_FIELDS:
            value = record.__dict__.get(key) or context.get(key)
            if value:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and key not in CONTEXT_FIELDS and not key.startswith("_")
        }

        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Configure logging for the service.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON lines if True, human-readable lines otherwise
        include_uvicorn: Route uvicorn loggers through the root handler too

    Environment Variables:
        LOG_LEVEL: Override the log level
        LOG_FORMAT: Override format ("json" or "text")
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    json_format = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(VitalsJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Service packages inherit the root handler.
    for logger_name in ["core", "api", "services", "repositories"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.handlers = []
        logger.propagate = True

    if include_uvicorn:
        for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
            logger = logging.getLogger(logger_name)
            logger.handlers = []
            logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
