"""
FastAPI Dependency Injection configuration for Vitals Service API.

This module provides the dependency injection (DI) infrastructure following
the Dependency Inversion Principle. It enables:
- Clean separation between API, Service, and Repository layers
- Easy testing with fake dependencies
- Centralized configuration of all dependencies

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (VitalsService, ShareService)
         ↓ Injected
    Repository Layer (VitalRecordRepository, SharedReportRepository)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from core.dependencies import get_vitals_service

    @router.get("/vitals")
    async def list_vitals(
        vitals_service: VitalsService = Depends(get_vitals_service)
    ):
        return vitals_service.list_records(owner_id)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging
from typing import Optional

from fastapi import Depends

from core.config import settings
from repositories import Database, SharedReportRepository, VitalRecordRepository
from services import ShareService, VitalsService
from services.report import ReportRenderer

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

_database_instance: Optional[Database] = None


def get_database() -> Database:
    """
    Get the database instance (singleton pattern via FastAPI DI).

    The database is created on first use with WAL mode and the configured
    busy timeout.

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.vitals_svc_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_vital_record_repository(db: Database = Depends(get_database)) -> VitalRecordRepository:
    """
    Get a VitalRecordRepository instance with database injected.

    Returns:
        VitalRecordRepository: Repository for owner-scoped record CRUD.
    """
    return VitalRecordRepository(db=db)


def get_shared_report_repository(db: Database = Depends(get_database)) -> SharedReportRepository:
    """
    Get a SharedReportRepository instance with database injected.

    Returns:
        SharedReportRepository: Repository for shared report snapshots.
    """
    return SharedReportRepository(db=db)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_vitals_service(
    record_repo: VitalRecordRepository = Depends(get_vital_record_repository),
) -> VitalsService:
    """
    Get a VitalsService instance with repository injected.

    Returns:
        VitalsService: Service for vital record operations.
    """
    return VitalsService(record_repository=record_repo)


def get_report_renderer() -> ReportRenderer:
    """
    Get a ReportRenderer instance.

    ReportRenderer is stateless and doesn't require repository injection.
    """
    return ReportRenderer()


def get_share_service(
    shared_repo: SharedReportRepository = Depends(get_shared_report_repository),
    renderer: ReportRenderer = Depends(get_report_renderer),
) -> ShareService:
    """
    Get a ShareService instance configured from settings.

    Returns:
        ShareService: Service for creating and resolving shared reports.
    """
    return ShareService(
        shared_report_repository=shared_repo,
        renderer=renderer,
        expiry_days=settings.vitals_svc_share_expiry_days,
        base_url=settings.vitals_svc_share_base_url,
    )
