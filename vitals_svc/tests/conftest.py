"""
Shared pytest fixtures for unit and API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories
4. Fixed Clock: Analytics tests pass an explicit ``now`` (NOW below)

Fixture Hierarchy:
    temp_db → repositories → services → test_app → client
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from fastapi import FastAPI

# Set test API key before importing config modules
# This must happen before any config imports
TEST_API_KEY = "test-api-key-for-testing-purposes-12345678"
os.environ.setdefault("VITALS_SVC_API_KEY", TEST_API_KEY)

from repositories.base import Database
from repositories import VitalRecordRepository, SharedReportRepository
from models.owner import Owner
from models.vital_record import VitalRecord
from services.vitals_service import VitalsService
from services.share_service import ShareService
from services.report import ReportRenderer
from core.exceptions import setup_exception_handlers
from core import dependencies as deps
from core.auth import verify_api_key

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
OWNER_ID = "owner-123"
OWNER_HEADERS = {
    "X-Owner-Id": OWNER_ID,
    "X-Owner-Email": "jane.doe@example.com",
    "X-Owner-Name": "Jane Doe",
}


@pytest.fixture
def now():
    """Fixed reference instant used by analytics tests."""
    return NOW


@pytest.fixture
def owner():
    return Owner(owner_id=OWNER_ID, email="jane.doe@example.com", display_name="Jane Doe")


@pytest.fixture
def make_record():
    """
    Factory for VitalRecord instances with healthy defaults.

    ``days_ago`` places the record relative to NOW; any measurement can be
    overridden by keyword.
    """
    def _make(days_ago: float = 0, owner_id: str = OWNER_ID, **overrides) -> VitalRecord:
        values = {
            "systolic": 118,
            "diastolic": 76,
            "heart_rate": 72,
            "spo2": 98,
            "temperature": 98.6,
            "weight": 165,
        }
        values.update(overrides)
        timestamp = values.pop("timestamp", NOW - timedelta(days=days_ago))
        return VitalRecord(owner_id=owner_id, timestamp=timestamp, **values)

    return _make


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    This fixture creates a fresh SQLite database in a temp file,
    ensuring complete isolation between tests.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    # Cleanup (WAL mode leaves -wal/-shm side files)
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def record_repo(temp_db):
    """Create a VitalRecordRepository with the test database."""
    return VitalRecordRepository(db=temp_db)


@pytest.fixture
def shared_repo(temp_db):
    """Create a SharedReportRepository with the test database."""
    return SharedReportRepository(db=temp_db)


@pytest.fixture
def vitals_service(record_repo):
    """Create a VitalsService with the test repository."""
    return VitalsService(record_repository=record_repo)


@pytest.fixture
def renderer():
    return ReportRenderer()


@pytest.fixture
def share_service(shared_repo, renderer):
    """Create a ShareService with the test repository."""
    return ShareService(
        shared_report_repository=shared_repo,
        renderer=renderer,
        expiry_days=30,
        base_url="https://vitals.example.com/",
    )


@pytest.fixture
def test_app(temp_db, record_repo, shared_repo, vitals_service, renderer, share_service):
    """
    Create a FastAPI test app with dependency overrides.

    This fixture creates a full FastAPI app and overrides the DI dependencies
    to use test instances. This approach:
    - Uses the real routers (testing actual endpoint code)
    - Injects test database and services via dependency_overrides
    - Registers exception handlers for proper error response testing
    """
    from api.routers import (
        analytics_router,
        health_router,
        reports_router,
        shared_router,
        vitals_router,
    )

    app = FastAPI(title="Vitals Service API Test")

    # Register exception handlers (same as production)
    setup_exception_handlers(app)

    # Override dependencies to use test instances
    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_vital_record_repository] = lambda: record_repo
    app.dependency_overrides[deps.get_shared_report_repository] = lambda: shared_repo
    app.dependency_overrides[deps.get_vitals_service] = lambda: vitals_service
    app.dependency_overrides[deps.get_report_renderer] = lambda: renderer
    app.dependency_overrides[deps.get_share_service] = lambda: share_service

    # Override auth to skip API key verification in tests
    async def skip_auth():
        return TEST_API_KEY
    app.dependency_overrides[verify_api_key] = skip_auth

    # Include the real routers (not test copies)
    app.include_router(health_router)
    app.include_router(vitals_router)
    app.include_router(analytics_router)
    app.include_router(reports_router)
    app.include_router(shared_router)

    yield app

    # Cleanup: Clear dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)
