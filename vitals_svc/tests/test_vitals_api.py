"""
Tests for the vital record API endpoints.

Uses the DI-based test_app from conftest: the real routers backed by a
temporary database, with API key checks disabled.
"""
from datetime import datetime, timedelta, timezone

OWNER_HEADERS = {
    "X-Owner-Id": "owner-123",
    "X-Owner-Email": "jane.doe@example.com",
    "X-Owner-Name": "Jane Doe",
}
OTHER_OWNER_HEADERS = {"X-Owner-Id": "someone-else"}


def _payload(**overrides):
    data = {
        "systolic": 120,
        "diastolic": 80,
        "heart_rate": 72,
        "spo2": 98,
        "temperature": 98.6,
        "weight": 165,
    }
    data.update(overrides)
    return data


def _days_ago(days):
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def _create(client, headers=OWNER_HEADERS, **overrides):
    response = client.post("/api/v1/vitals", json=_payload(**overrides), headers=headers)
    assert response.status_code == 201
    return response.json()


# =============================================================================
# CREATE
# =============================================================================

def test_create_vital_record(client):
    """Test creating a record returns the stored record."""
    response = client.post(
        "/api/v1/vitals",
        json=_payload(timestamp="2025-01-15T10:30:00Z"),
        headers=OWNER_HEADERS,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["blood_pressure"] == "120/80"
    assert data["timestamp"] == "2025-01-15T10:30:00Z"
    assert data["date"] == "2025-01-15"


def test_create_uses_capture_offset_for_date(client):
    """A late-evening reading keeps its local calendar date."""
    data = _create(client, timestamp="2025-01-15T23:30:00-05:00")
    assert data["date"] == "2025-01-15"
    assert data["timestamp"] == "2025-01-16T04:30:00Z"


def test_create_rounds_temperature(client):
    data = _create(client, temperature=98.66)
    assert data["temperature"] == 98.7


def test_create_without_owner_returns_401(client):
    response = client.post("/api/v1/vitals", json=_payload())
    assert response.status_code == 401
    assert response.json()["detail"] == "User not authenticated"


def test_create_out_of_range_returns_422(client):
    response = client.post("/api/v1/vitals", json=_payload(spo2=101), headers=OWNER_HEADERS)
    assert response.status_code == 422


def test_create_diastolic_above_systolic_returns_422(client):
    response = client.post(
        "/api/v1/vitals",
        json=_payload(systolic=80, diastolic=120),
        headers=OWNER_HEADERS,
    )
    assert response.status_code == 422


def test_create_missing_field_returns_422(client):
    data = _payload()
    del data["weight"]
    response = client.post("/api/v1/vitals", json=data, headers=OWNER_HEADERS)
    assert response.status_code == 422


# =============================================================================
# LIST
# =============================================================================

def test_list_newest_first(client):
    for days in (3, 0, 10):
        _create(client, timestamp=_days_ago(days))

    response = client.get("/api/v1/vitals", headers=OWNER_HEADERS)

    assert response.status_code == 200
    timestamps = [r["timestamp"] for r in response.json()]
    assert len(timestamps) == 3
    assert timestamps == sorted(timestamps, reverse=True)


def test_list_with_window(client):
    for days in (1, 3, 10, 40):
        _create(client, timestamp=_days_ago(days))

    response = client.get("/api/v1/vitals", params={"window": "7"}, headers=OWNER_HEADERS)

    data = response.json()
    assert len(data) == 2
    assert data[0]["timestamp"] > data[1]["timestamp"]

    response = client.get("/api/v1/vitals", params={"window": "all"}, headers=OWNER_HEADERS)
    assert len(response.json()) == 4


def test_list_with_explicit_range(client):
    for days in (1, 5, 9):
        _create(client, timestamp=_days_ago(days))

    response = client.get(
        "/api/v1/vitals",
        params={"start": _days_ago(6), "end": _days_ago(2)},
        headers=OWNER_HEADERS,
    )

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_list_with_limit(client):
    for days in range(5):
        _create(client, timestamp=_days_ago(days))

    response = client.get("/api/v1/vitals", params={"limit": 2}, headers=OWNER_HEADERS)
    assert len(response.json()) == 2


def test_list_invalid_window_returns_400(client):
    response = client.get("/api/v1/vitals", params={"window": "fortnight"}, headers=OWNER_HEADERS)
    assert response.status_code == 400
    assert "fortnight" in response.json()["detail"]


def test_list_is_owner_scoped(client):
    _create(client)
    _create(client, headers=OTHER_OWNER_HEADERS)

    response = client.get("/api/v1/vitals", headers=OTHER_OWNER_HEADERS)
    assert len(response.json()) == 1


# =============================================================================
# GET / UPDATE / DELETE
# =============================================================================

def test_get_record(client):
    created = _create(client)

    response = client.get(f"/api/v1/vitals/{created['id']}", headers=OWNER_HEADERS)

    assert response.status_code == 200
    assert response.json() == created


def test_get_record_of_other_owner_returns_404(client):
    created = _create(client)

    response = client.get(f"/api/v1/vitals/{created['id']}", headers=OTHER_OWNER_HEADERS)
    assert response.status_code == 404


def test_update_record(client):
    created = _create(client)

    response = client.patch(
        f"/api/v1/vitals/{created['id']}",
        json={"heart_rate": 64, "temperature": 99.04},
        headers=OWNER_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["heart_rate"] == 64
    assert data["temperature"] == 99.0
    assert data["systolic"] == 120
    assert data["timestamp"] == created["timestamp"]


def test_update_with_no_fields_returns_400(client):
    created = _create(client)

    response = client.patch(f"/api/v1/vitals/{created['id']}", json={}, headers=OWNER_HEADERS)
    assert response.status_code == 400


def test_update_diastolic_above_stored_systolic_returns_400(client):
    created = _create(client)

    response = client.patch(
        f"/api/v1/vitals/{created['id']}",
        json={"diastolic": 150},
        headers=OWNER_HEADERS,
    )
    assert response.status_code == 400


def test_delete_record(client):
    created = _create(client)

    response = client.delete(f"/api/v1/vitals/{created['id']}", headers=OWNER_HEADERS)
    assert response.status_code == 204

    response = client.get(f"/api/v1/vitals/{created['id']}", headers=OWNER_HEADERS)
    assert response.status_code == 404


def test_delete_missing_record_returns_404(client):
    response = client.delete("/api/v1/vitals/does-not-exist", headers=OWNER_HEADERS)
    assert response.status_code == 404


def test_delete_all_records(client):
    for _ in range(3):
        _create(client)
    _create(client, headers=OTHER_OWNER_HEADERS)

    response = client.delete("/api/v1/vitals", headers=OWNER_HEADERS)

    assert response.status_code == 200
    assert response.json() == {"deleted": 3}
    assert client.get("/api/v1/vitals", headers=OWNER_HEADERS).json() == []
    assert len(client.get("/api/v1/vitals", headers=OTHER_OWNER_HEADERS).json()) == 1
