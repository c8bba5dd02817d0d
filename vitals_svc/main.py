"""
FastAPI application entry point for Vitals Service API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request ids
- Request ID Propagation: X-Request-ID tracked across logs
- Dependency Injection: Services and repositories injected via Depends()
- Exception Handling: Consistent error responses via setup_exception_handlers()
- CORS Middleware: Allows cross-origin requests from the mobile/web app
- Lifespan Management: Database initialization

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & timing        │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready, /                   │
    │    ├── vitals.py     - Vital record CRUD                    │
    │    ├── analytics.py  - Summary, charts, insights, trends    │
    │    ├── reports.py    - Report JSON/HTML and share links     │
    │    └── shared.py     - Public shared report reads           │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── VitalsService      - Owner-scoped record logic       │
    │    ├── ShareService       - Shared report snapshots         │
    │    ├── analytics/         - Pure analytics engine           │
    │    └── report/            - HTML + Plotly rendering         │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    │    ├── VitalRecordRepository    - Record store adapter      │
    │    └── SharedReportRepository   - Shared report storage     │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite)              ← Injected into Repositories│
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, LOG_FORMAT, LOG_LEVEL
from core.dependencies import get_database
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import (
    analytics_router,
    health_router,
    reports_router,
    shared_router,
    vitals_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured logging
        - Initializes database connection (triggers schema creation)

    Shutdown:
        - Logs shutdown message
    """
    # Configure structured logging FIRST (before any other logging)
    setup_logging(level=LOG_LEVEL, json_format=LOG_FORMAT.lower() == "json")

    logger = logging.getLogger(__name__)
    logger.info("Starting Vitals Service API...")

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )

    yield  # Application runs here

    logger.info("Vitals Service API shutting down...")


# Create FastAPI app with lifespan context
app = FastAPI(
    title="Vitals Service API",
    description="REST API for personal vital-sign tracking: record blood pressure, heart rate, SpO2, "
                "temperature and weight, and get trend charts, insights, reports and share links.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
# VitalsServiceError and its subclasses are converted to HTTP responses.
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Order matters! Middleware is executed in REVERSE order of registration.
# Last registered = first to handle request, last to handle response.

# 1. CORS Middleware (innermost - closest to routes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging Middleware (outermost - captures all requests)
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(vitals_router)
app.include_router(analytics_router)
app.include_router(reports_router)
app.include_router(shared_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
