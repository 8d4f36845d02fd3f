"""
Tests for the HTTP API.

Each test runs against a fresh temp database (see conftest.isolated_home);
the app resolves the shared store lazily, so importing it once is enough.
"""

import pytest
from fastapi.testclient import TestClient

SLOT = "/api/slots/emp-1/2025-09-22/am"


@pytest.fixture
def client():
    from api.server import app

    return TestClient(app)


def _task(task_id, column_start=0, width=1):
    return {"id": task_id, "column_start": column_start, "width": width}


def _drop(client, slot=SLOT, **body):
    body.setdefault("task_id", "T-1")
    return client.post(f"{slot}/drop", json=body)


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_request_id_generated(self, client):
        response = client.get("/api/health")
        assert response.headers["x-request-id"].startswith("req-")

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-from-board"})
        assert response.headers["x-request-id"] == "req-from-board"


class TestLayoutEndpoints:
    def test_resolve_column(self, client):
        body = {"drop_x": 50, "bounds": {"left": 100, "width": 200}}
        response = client.post("/api/layout/resolve-column", json=body)
        assert response.status_code == 200
        assert response.json() == {"column": 0}

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_coordinate_is_422(self, client, literal):
        raw = '{"drop_x": ' + literal + ', "bounds": {"left": 0, "width": 400}}'
        response = client.post(
            "/api/layout/resolve-column",
            content=raw,
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 422

    def test_validate_rejects_fifth(self, client):
        body = {
            "existing": [_task(name, i) for i, name in enumerate("ABCD")],
            "incoming": _task("N"),
        }
        response = client.post("/api/layout/validate", json=body)
        assert response.json() == {
            "accepted": False,
            "reason": "too many tasks for 4 columns",
            "code": "capacity_exceeded",
        }

    def test_place_compresses(self, client):
        body = {"existing": [_task("A", 0, 4)], "incoming": {"id": "N"}, "target_column": 0}
        response = client.post("/api/layout/place", json=body)
        assert response.status_code == 200
        data = response.json()
        assert [(t["id"], t["column_start"], t["width"]) for t in data["tasks"]] == [
            ("N", 0, 1),
            ("A", 1, 3),
        ]
        assert data["total_width"] == 4

    def test_place_rejection_is_409(self, client):
        body = {
            "existing": [_task(name, i) for i, name in enumerate("ABCD")],
            "incoming": _task("N"),
            "target_column": 2,
        }
        response = client.post("/api/layout/place", json=body)
        assert response.status_code == 409
        assert response.json() == {
            "status": "error",
            "error": "too many tasks for 4 columns",
            "error_code": "capacity_exceeded",
        }

    def test_width_below_one_is_422(self, client):
        body = {"existing": [], "incoming": _task("N", width=0.5), "target_column": 0}
        assert client.post("/api/layout/place", json=body).status_code == 422

    def test_target_column_out_of_range_is_422(self, client):
        body = {"existing": [], "incoming": _task("N"), "target_column": 4}
        assert client.post("/api/layout/place", json=body).status_code == 422

    def test_left_pack(self, client):
        body = {"tasks": [_task("A", 0, 1), _task("C", 2, 2)]}
        data = client.post("/api/layout/left-pack", json=body).json()
        assert [(t["id"], t["column_start"]) for t in data["tasks"]] == [("A", 0), ("C", 1)]


class TestSlotEndpoints:
    def test_drop_and_read_back(self, client):
        response = _drop(client, width=2, target_column=1, title="Sketch")
        assert response.status_code == 200
        data = response.json()
        assert data["half_day"] == 1
        assert isinstance(data["assignment_id"], int)

        slot = client.get(SLOT).json()
        assert slot["total_width"] == 2
        assert slot["tasks"][0]["title"] == "Sketch"

    def test_half_day_as_number(self, client):
        _drop(client, target_column=0)
        assert len(client.get("/api/slots/emp-1/2025-09-22/1").json()["tasks"]) == 1

    def test_drop_by_coordinate(self, client):
        _drop(client, target_column=0)
        response = _drop(client, task_id="T-2", drop_x=10, bounds={"left": 0, "width": 400})
        assert response.status_code == 200
        assert response.json()["target_column"] == 0
        assert response.json()["tasks"][0]["id"] == response.json()["assignment_id"]

    def test_move_between_slots(self, client):
        first = _drop(client, width=2, target_column=0).json()["assignment_id"]
        _drop(client, task_id="T-2", width=2, target_column=2)

        pm = "/api/slots/emp-1/2025-09-22/pm"
        response = client.post(f"{pm}/drop", json={"assignment_id": first, "target_column": 0})
        assert response.status_code == 200

        assert [t["id"] for t in client.get(pm).json()["tasks"]] == [first]
        am_tasks = client.get(SLOT).json()["tasks"]
        assert [(t["column_start"], t["width"]) for t in am_tasks] == [(0, 2)]

    def test_fifth_drop_is_409(self, client):
        for column in range(4):
            _drop(client, task_id=f"T-{column}", target_column=column)
        response = _drop(client, task_id="T-5", target_column=1)
        assert response.status_code == 409
        assert response.json()["error_code"] == "capacity_exceeded"
        assert len(client.get(SLOT).json()["tasks"]) == 4

    def test_non_finite_bounds_on_drop_is_422(self, client):
        raw = '{"task_id": "T-1", "drop_x": 10, "bounds": {"left": 0, "width": Infinity}}'
        response = client.post(
            f"{SLOT}/drop", content=raw, headers={"content-type": "application/json"}
        )
        assert response.status_code == 422
        assert client.get(SLOT).json()["tasks"] == []

    def test_drop_needs_a_column(self, client):
        assert _drop(client).status_code == 422

    def test_drop_needs_a_task(self, client):
        response = client.post(f"{SLOT}/drop", json={"target_column": 0})
        assert response.status_code == 422

    def test_drop_unknown_assignment_is_404(self, client):
        response = client.post(f"{SLOT}/drop", json={"assignment_id": 999, "target_column": 0})
        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found"

    def test_invalid_half_day_is_422(self, client):
        assert client.get("/api/slots/emp-1/2025-09-22/noon").status_code == 422

    def test_invalid_date_is_422(self, client):
        assert client.get("/api/slots/emp-1/not-a-date/am").status_code == 422

    def test_delete_left_packs(self, client):
        first = _drop(client, width=2, target_column=0).json()["assignment_id"]
        second = _drop(client, task_id="T-2", width=2, target_column=2).json()["assignment_id"]

        response = client.delete(f"{SLOT}/tasks/{first}")
        assert response.status_code == 200
        tasks = response.json()["tasks"]
        assert [(t["id"], t["column_start"], t["width"]) for t in tasks] == [(second, 0, 2)]

    def test_delete_unknown_is_404(self, client):
        response = client.delete(f"{SLOT}/tasks/42")
        assert response.status_code == 404
        assert response.json()["status"] == "error"


class TestCapacityEndpoints:
    def test_capacity(self, client):
        _drop(client, target_column=0)
        data = client.get("/api/capacity/emp-1/2025-09-22/am").json()
        assert data["current"] == 1
        assert data["is_available"] is True
        assert data["is_overbooked"] is False

    def test_availability(self, client):
        for column in range(4):
            _drop(client, task_id=f"T-{column}", target_column=column)
        response = client.get(
            "/api/availability/emp-1", params={"start": "2025-09-22", "end": "2025-09-23"}
        )
        assert response.status_code == 200
        assert response.json()["days"] == [
            {"date": "2025-09-22", "am": False, "pm": True},
            {"date": "2025-09-23", "am": True, "pm": True},
        ]

    def test_availability_reversed_range(self, client):
        response = client.get(
            "/api/availability/emp-1", params={"start": "2025-09-23", "end": "2025-09-22"}
        )
        assert response.status_code == 422

    def test_availability_requires_range(self, client):
        assert client.get("/api/availability/emp-1").status_code == 422
