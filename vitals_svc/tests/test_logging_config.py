"""
Tests for structured logging and the request log context.
"""
import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.logging_config import (
    VitalsJSONFormatter,
    bind_log_context,
    clear_log_context,
    get_log_context,
)
from core.middleware import LoggingMiddleware


@pytest.fixture(autouse=True)
def empty_log_context():
    clear_log_context()
    yield
    clear_log_context()


def _format(message="Vital record created", **extra):
    record = logging.LogRecord("services.vitals_service", logging.INFO, __file__, 1, message, None, None)
    record.__dict__.update(extra)
    return json.loads(VitalsJSONFormatter().format(record))


class CapturingHandler(logging.Handler):
    """Formats records at emit time, while the request context is still bound."""

    def __init__(self):
        super().__init__()
        self.setFormatter(VitalsJSONFormatter())
        self.lines = []

    def emit(self, record):
        self.lines.append(json.loads(self.format(record)))


class TestVitalsJSONFormatter:

    def test_base_fields(self):
        entry = _format()

        assert entry["level"] == "INFO"
        assert entry["logger"] == "services.vitals_service"
        assert entry["message"] == "Vital record created"
        assert entry["timestamp"].endswith("Z")
        assert "owner_id" not in entry
        assert "extra" not in entry

    def test_bound_owner_and_request_are_top_level(self):
        bind_log_context(request_id="req-1", owner_id="owner-123")

        entry = _format()

        assert entry["request_id"] == "req-1"
        assert entry["owner_id"] == "owner-123"

    def test_record_id_from_extra_is_top_level(self):
        entry = _format(record_id="rec-9", window_days=30)

        assert entry["record_id"] == "rec-9"
        assert entry["extra"] == {"window_days": 30}

    def test_extra_owner_overrides_bound_owner(self):
        bind_log_context(owner_id="owner-123")

        assert _format(owner_id="owner-456")["owner_id"] == "owner-456"

    def test_blank_values_are_not_bound(self):
        bind_log_context(request_id="req-1", owner_id=None)
        bind_log_context(owner_id="")

        assert get_log_context() == {"request_id": "req-1"}

    def test_clear_log_context(self):
        bind_log_context(owner_id="owner-123")
        clear_log_context()

        assert "owner_id" not in _format()


class TestLoggingMiddleware:

    @pytest.fixture
    def captured(self):
        handler = CapturingHandler()
        route_logger = logging.getLogger("tests.route")
        middleware_logger = logging.getLogger("core.middleware")
        for logger in (route_logger, middleware_logger):
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        yield handler
        for logger in (route_logger, middleware_logger):
            logger.removeHandler(handler)

    @pytest.fixture
    def app_client(self):
        app = FastAPI()
        app.add_middleware(LoggingMiddleware)

        @app.get("/api/v1/vitals")
        async def list_vitals():
            logging.getLogger("tests.route").info("Listing vitals", extra={"record_id": "rec-1"})
            return []

        return TestClient(app)

    def test_owner_and_request_id_are_logged(self, app_client, captured):
        response = app_client.get(
            "/api/v1/vitals",
            headers={"X-Owner-Id": " owner-123 ", "X-Request-ID": "req-42"},
        )

        assert response.status_code == 200
        route_line = next(line for line in captured.lines if line["message"] == "Listing vitals")
        assert route_line["owner_id"] == "owner-123"
        assert route_line["request_id"] == "req-42"
        assert route_line["record_id"] == "rec-1"
        completed = next(line for line in captured.lines if line["message"] == "Request completed")
        assert completed["owner_id"] == "owner-123"
        assert completed["extra"]["status_code"] == 200

    def test_context_is_cleared_after_request(self, app_client, captured):
        app_client.get("/api/v1/vitals", headers={"X-Owner-Id": "owner-123"})

        assert get_log_context() == {}
