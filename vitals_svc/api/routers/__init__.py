"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.vitals import router as vitals_router
from api.routers.analytics import router as analytics_router
from api.routers.reports import router as reports_router
from api.routers.shared import router as shared_router

__all__ = ["health_router", "vitals_router", "analytics_router", "reports_router", "shared_router"]
