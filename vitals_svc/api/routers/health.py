"""
Health and readiness endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the database reachable?)
- /: API root with links

These endpoints are designed for:
- Docker / hosting platform health checks
- Uptime monitoring

No authentication is required on these endpoints.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from core.dependencies import get_database
from repositories import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

API_VERSION = "1.0.0"


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok", "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready", "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    """
    Liveness probe - is the application process alive?

    Always returns 200 if the app is running. Does NOT check the
    database (that's what /ready is for).
    """
    return HealthResponse(status="healthy", version=API_VERSION, timestamp=_timestamp())


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

def _check_database(db: Database) -> DependencyStatus:
    """Run a trivial query to verify the SQLite database is accessible."""
    start = time.perf_counter()
    try:
        conn = db.get_connection()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()

        latency_ms = (time.perf_counter() - start) * 1000
        return DependencyStatus(
            name="database",
            status="ok",
            latency_ms=round(latency_ms, 2),
            message="SQLite connection healthy"
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Connection failed: {type(e).__name__}"
        )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check if the application is ready to serve requests. Returns 503 if the database is unavailable."
)
async def readiness_check(response: Response, db: Database = Depends(get_database)) -> ReadyResponse:
    """
    Readiness probe - can the application handle requests?

    Returns:
    - 200 with status="ready" if the database is reachable
    - 503 with status="not_ready" otherwise
    """
    db_status = _check_database(db)

    if db_status.status == "unavailable":
        status = "not_ready"
        response.status_code = 503
    else:
        status = "ready"

    return ReadyResponse(status=status, dependencies=[db_status], timestamp=_timestamp())


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@router.get(
    "/",
    summary="API root",
    description="Root endpoint with basic API information."
)
async def root() -> Dict[str, Any]:
    """
    Root endpoint - basic API information.

    Returns service name, version, and links to documentation.
    """
    return {
        "service": "Vitals Service API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
    }
