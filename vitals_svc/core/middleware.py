"""
FastAPI middleware for request logging.

This module provides:
- Request/Response logging with request_id and owner_id propagation
- Request timing for latency tracking in logs
- Request ID in response headers for debugging

Middleware Stack Order (in main.py):
    1. LoggingMiddleware (outermost - captures everything)
    2. CORS Middleware
    3. Application routes
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging_config import bind_log_context, clear_log_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
OWNER_ID_HEADER = "X-Owner-Id"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request/Response logging middleware with request and owner context.

    Features:
    - Reuses the caller's X-Request-ID or generates a short one
    - Binds the X-Owner-Id header so every log line names the owner
    - Logs request start and completion with structured JSON
    - Adds X-Request-ID header to responses for debugging

    Log Output (JSON):
    {
        "timestamp": "...",
        "level": "INFO",
        "message": "Request completed",
        "request_id": "abc-123",
        "owner_id": "owner-123",
        "extra": {
            "method": "GET",
            "path": "/api/v1/vitals",
            "status_code": 200,
            "duration_ms": 45.2
        }
    }

    Shared report paths are logged without their id segment so that
    public link ids do not end up in log files.
    """

    # Paths to exclude from detailed logging (reduce noise)
    EXCLUDED_PATHS = {"/health", "/ready", "/docs", "/redoc", "/openapi.json"}

    SHARED_REPORT_PREFIX = "/api/v1/shared-reports/"

    def _loggable_path(self, path: str) -> str:
        if path.startswith(self.SHARED_REPORT_PREFIX):
            return self.SHARED_REPORT_PREFIX + "{report_id}"
        return path

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with logging and timing."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        bind_log_context(
            request_id=request_id,
            owner_id=(request.headers.get(OWNER_ID_HEADER) or "").strip() or None,
        )

        method = request.method
        path = self._loggable_path(request.url.path)
        start_time = time.perf_counter()

        try:
            if path not in self.EXCLUDED_PATHS:
                logger.info(
                    "Request started",
                    extra={
                        "method": method,
                        "path": path,
                        "query": str(request.query_params) if request.query_params else None,
                    }
                )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception(
                    "Request failed with exception",
                    extra={"method": method, "path": path, "error": str(e)}
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            status_code = response.status_code

            if path not in self.EXCLUDED_PATHS:
                log_level = logging.WARNING if status_code >= 400 else logging.INFO
                logger.log(
                    log_level,
                    "Request completed",
                    extra={
                        "method": method,
                        "path": path,
                        "status_code": status_code,
                        "duration_ms": round(duration_ms, 2),
                    }
                )
        finally:
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
