from __future__ import annotations

from datetime import date

import pytest

from src.timekeeping_system.timekeeping_system.core.exceptions import (
    AuthorizationError,
    DomainError,
    InsufficientBalanceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.timekeeping_system.timekeeping_system.main import create_app
from tests.fakes import add_commercial_schedule, credit

ADMIN = 1
EMPLOYEE = 2


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_anonymous_request_is_unauthorized(client):
    resp = client.get("/api/time-bank/me")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_employee_cannot_use_admin_routes(client):
    _login(client, EMPLOYEE, "employee")

    resp = client.get(f"/api/admin/time-bank/{EMPLOYEE}")

    assert resp.status_code == 403


def test_clock_in_then_status(client):
    _login(client, EMPLOYEE, "employee")

    created = client.post("/api/time-records", json={"latitude": "-23.5", "longitude": "-46.6"})
    status = client.get("/api/time-records/status")

    assert created.status_code == 201
    assert created.get_json()["data"]["type"] == "in"
    assert status.get_json()["data"] == {"status": "in"}


def test_worked_hours_uses_camel_case_keys(client, stores):
    _login(client, ADMIN, "admin")

    resp = client.get(f"/api/admin/worked-hours/{EMPLOYEE}?start=2024-01-15&end=2024-01-15")

    assert resp.status_code == 200
    assert set(resp.get_json()["data"]) == {
        "totalWorkedMinutes",
        "regularMinutes",
        "overtimeMinutes",
        "missingMinutes",
        "lateMinutes",
    }


def test_invalid_date_maps_to_400(client):
    _login(client, ADMIN, "admin")

    resp = client.get(f"/api/admin/worked-hours/{EMPLOYEE}?start=amanha")

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Data inválida (AAAA-MM-DD): 'amanha'"}


def test_compensation_with_insufficient_balance_maps_to_422(client, stores):
    _login(client, ADMIN, "admin")
    credit(stores.time_bank, EMPLOYEE, date(2024, 1, 2), "0.50")

    resp = client.post(
        f"/api/admin/time-bank/{EMPLOYEE}/compensate",
        json={"minutes": 60, "description": "Folga", "compensation_date": "2024-01-20"},
    )

    assert resp.status_code == 422
    assert resp.get_json()["success"] is False


def test_compensation_returns_new_balance(client, stores):
    _login(client, ADMIN, "admin")
    credit(stores.time_bank, EMPLOYEE, date(2024, 1, 2), "2.00")

    resp = client.post(
        f"/api/admin/time-bank/{EMPLOYEE}/compensate",
        json={"minutes": 90, "description": "Folga", "compensation_date": "2024-01-20"},
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"compensated": True, "balance_minutes": 30}


def test_missing_schedule_maps_to_404(client):
    _login(client, ADMIN, "admin")

    resp = client.get("/api/admin/work-schedules/99")

    assert resp.status_code == 404


def test_deciding_twice_maps_to_409(client):
    _login(client, EMPLOYEE, "employee")
    created = client.post(
        "/api/absence-requests",
        json={"start_date": "2024-01-22", "end_date": "2024-01-22", "type": "personal", "reason": "Cartório"},
    )
    request_id = created.get_json()["data"]["request_id"]

    _login(client, ADMIN, "admin")
    first = client.post(f"/api/admin/absence-requests/{request_id}/approve", json={"notes": "ok"})
    second = client.post(f"/api/admin/absence-requests/{request_id}/reject", json={})

    assert first.status_code == 200
    assert first.get_json()["data"]["status"] == "approved"
    assert second.status_code == 409
    assert second.get_json()["message"] == "Solicitação já foi processada"


def test_employee_cannot_edit_someone_elses_request(client, stores):
    stores.absences.create(
        user_id=ADMIN, start_date=date(2024, 1, 22), end_date=date(2024, 1, 22), type="personal", reason="x"
    )
    _login(client, EMPLOYEE, "employee")

    resp = client.delete("/api/absence-requests/1")

    assert resp.status_code == 403


def test_schedule_setup_through_api(client):
    _login(client, ADMIN, "admin")

    created = client.post("/api/admin/work-schedules", json={"name": "Meio período", "type": "regular", "weekly_hours": 20})
    schedule_id = created.get_json()["data"]["schedule_id"]
    detail = client.post(
        f"/api/admin/work-schedules/{schedule_id}/details",
        json={"weekday": "monday", "start_time": "08:00", "end_time": "12:00"},
    )
    assigned = client.post(
        "/api/admin/employee-schedules",
        json={"user_id": EMPLOYEE, "schedule_id": schedule_id, "start_date": "2024-01-01"},
    )

    assert created.status_code == 201
    assert detail.status_code == 201
    assert detail.get_json()["data"]["start_time"] == "08:00:00"
    assert assigned.status_code == 201


def test_process_record_endpoint(client, stores):
    from datetime import datetime

    from src.timekeeping_system.timekeeping_system.core.enums import RecordType

    schedule_id = add_commercial_schedule(stores.schedules)
    stores.assignments.create(user_id=EMPLOYEE, schedule_id=schedule_id, start_date=date(2024, 1, 1), end_date=None, notes=None)
    stores.records.add(EMPLOYEE, datetime(2024, 1, 15, 8, 0), RecordType.IN)
    out = stores.records.add(EMPLOYEE, datetime(2024, 1, 15, 18, 30), RecordType.OUT)
    _login(client, ADMIN, "admin")

    resp = client.post(f"/api/admin/time-records/{out.record_id}/process")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"credited": True}


def test_salary_change_shows_up_in_audit_logs(client):
    _login(client, ADMIN, "admin")
    created = client.post(
        "/api/admin/salaries",
        json={"user_id": EMPLOYEE, "amount": "4200.00", "effective_date": "2024-01-01"},
    )
    salary_id = created.get_json()["data"]["salary_id"]

    resp = client.get(f"/api/admin/audit-logs?entity_type=salary&entity_id={salary_id}")

    assert created.status_code == 201
    logs = resp.get_json()["data"]
    assert [log["action"] for log in logs] == ["create"]
    assert logs[0]["new_values"]["amount"] == "4200.00"


@pytest.mark.parametrize(
    "error, status",
    [
        (ValidationError("x"), 400),
        (AuthorizationError("x"), 403),
        (NotFoundError("x"), 404),
        (InvalidStateError("x"), 409),
        (InsufficientBalanceError("x"), 422),
        (DomainError("x"), 400),
    ],
)
def test_domain_errors_map_to_status_codes(app, error, status):
    @app.route("/api/raise", endpoint="raise_domain_error")
    def raise_domain_error():
        raise error

    resp = app.test_client().get("/api/raise")

    assert resp.status_code == status
    assert resp.get_json() == {"success": False, "message": "x"}
