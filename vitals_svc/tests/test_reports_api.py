"""
Tests for report export and share link endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest

OWNER_ID = "owner-123"
OWNER_HEADERS = {
    "X-Owner-Id": OWNER_ID,
    "X-Owner-Email": "jane.doe@example.com",
    "X-Owner-Name": "Jane Doe",
}


@pytest.fixture
def readings(vitals_service):
    """Twenty daily readings ending just before the current time."""
    now = datetime.now(timezone.utc)
    return [
        vitals_service.add_record(OWNER_ID, {
            "systolic": 118,
            "diastolic": 76,
            "heart_rate": 72,
            "spo2": 98,
            "temperature": 98.6,
            "weight": 165,
            "timestamp": now - timedelta(days=days, minutes=1),
        })
        for days in range(20)
    ]


class TestReportExport:

    def test_report_json(self, client, readings):
        response = client.get("/api/v1/reports", params={"window": "30"}, headers=OWNER_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["owner_name"] == "Jane Doe"
        assert data["owner_email"] == "jane.doe@example.com"
        assert data["window_label"] == "Last 30 Days"
        assert data["total_records"] == 20
        assert len(data["records"]) == 15
        assert data["averages"]["systolic"] == 118
        assert set(data["charts"]) == {"bloodPressure", "heartRate", "spO2", "temperature"}
        assert "professional medical advice" in data["disclaimer"]

    def test_report_json_empty(self, client):
        data = client.get("/api/v1/reports", headers=OWNER_HEADERS).json()

        assert data["total_records"] == 0
        assert data["averages"] is None
        assert data["records"] == []

    def test_report_html_download(self, client, readings):
        response = client.get("/api/v1/reports/html", params={"window": "7"}, headers=OWNER_HEADERS)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="vitals-report-')
        assert disposition.endswith('.html"')
        assert "Vitals Health Report" in response.text
        assert "Last 7 Days" in response.text

    def test_report_requires_owner(self, client):
        assert client.get("/api/v1/reports").status_code == 401


class TestShareLinks:

    def test_create_and_read_shared_report(self, client, readings):
        response = client.post("/api/v1/reports/share", params={"window": "7"}, headers=OWNER_HEADERS)

        assert response.status_code == 201
        created = response.json()
        assert created["url"] == f"https://vitals.example.com/shared-report/{created['id']}"
        assert created["total_records"] == 7

        # Public read: no owner headers
        response = client.get(f"/api/v1/shared-reports/{created['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["owner_name"] == "Jane Doe"
        assert data["expires_at"] == created["expires_at"]
        assert data["preview"]["total_records"] == 7
        assert "jane.doe@example.com" not in response.text
        assert OWNER_ID not in response.text

    def test_shared_report_html(self, client, readings):
        created = client.post("/api/v1/reports/share", headers=OWNER_HEADERS).json()

        response = client.get(f"/api/v1/shared-reports/{created['id']}/html")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Vitals Health Report" in response.text

    def test_unknown_shared_report(self, client):
        assert client.get("/api/v1/shared-reports/does-not-exist").status_code == 404
        assert client.get("/api/v1/shared-reports/does-not-exist/html").status_code == 404

    def test_expired_shared_report_is_not_found(self, client, share_service, owner):
        report = share_service.create_shared_report(
            owner, [], now=datetime.now(timezone.utc) - timedelta(days=31)
        )

        assert client.get(f"/api/v1/shared-reports/{report.id}").status_code == 404

    def test_list_share_links(self, client, readings, share_service, owner):
        client.post("/api/v1/reports/share", headers=OWNER_HEADERS)
        share_service.create_shared_report(
            owner, [], now=datetime.now(timezone.utc) - timedelta(days=31)
        )

        response = client.get("/api/v1/reports/share", headers=OWNER_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        assert [entry["expired"] for entry in data] == [False, True]

    def test_share_requires_owner(self, client):
        assert client.post("/api/v1/reports/share").status_code == 401
