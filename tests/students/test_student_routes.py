from __future__ import annotations

from decimal import Decimal

import pytest

from src.library_seats.library_seats.main import create_app
from src.library_seats.library_seats.stats.model import MonthTotals

from tests.fakes import FakeStats, make_container

NEW_STUDENT = {
    "name": "Asha Rao",
    "email": "asha@example.com",
    "phone": "9876500001",
    "address": "12 Park Street",
    "branch_id": 1,
    "membership_start": "2026-03-01",
    "membership_end": "2026-03-31",
    "total_fee": "1000",
    "amount_paid": 250,
    "seat_id": 1,
    "shift_ids": [1],
}


@pytest.fixture
def stats():
    return FakeStats(MonthTotals(collection=Decimal("5000"), due=Decimal("1200.50"), expense=Decimal("1800")))


@pytest.fixture
def container(stats):
    return make_container(stats=stats)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


def _login(client, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["name"] = "Tester"
        sess["role"] = role


@pytest.fixture
def admin(app):
    client = app.test_client()
    _login(client, "admin")
    return client


@pytest.fixture
def staff(app):
    client = app.test_client()
    _login(client, "staff")
    return client


def test_requires_session(app):
    resp = app.test_client().get("/students")

    assert resp.status_code == 401


def test_create_returns_201_with_student(staff):
    resp = staff.post("/students", json=NEW_STUDENT)

    assert resp.status_code == 201
    student = resp.get_json()["student"]
    assert student["id"] == 1
    assert student["due_amount"] == 750.0
    assert student["status"] == "active"
    assert student["membership_start"] == "2026-03-01"


def test_create_validation_error_is_400(staff):
    resp = staff.post("/students", json={**NEW_STUDENT, "name": ""})

    assert resp.status_code == 400
    assert resp.get_json() == {
        "message": "Required fields missing (name, branch_id, membership_start, membership_end)"
    }


def test_create_conflict_is_400(staff):
    staff.post("/students", json=NEW_STUDENT)

    resp = staff.post("/students", json={**NEW_STUDENT, "name": "Other"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Seat is already assigned for shift 1"


def test_update_unknown_student_is_404(staff):
    resp = staff.put("/students/77", json=NEW_STUDENT)

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Student not found"


def test_update_returns_student(staff):
    staff.post("/students", json=NEW_STUDENT)

    resp = staff.put("/students/1", json={**NEW_STUDENT, "name": "Asha R.", "shift_ids": []})

    assert resp.status_code == 200
    assert resp.get_json()["student"]["name"] == "Asha R."
    assert staff.get("/students/1").get_json()["assignments"] == []


def test_renew_is_admin_only(staff):
    staff.post("/students", json=NEW_STUDENT)

    resp = staff.post("/students/1/renew", json={"membership_start": "2026-04-01", "membership_end": "2026-04-30"})

    assert resp.status_code == 403


def test_renew_reports_active(admin):
    admin.post("/students", json={**NEW_STUDENT, "membership_end": "2026-02-01"})

    resp = admin.post("/students/1/renew", json={"membership_start": "2026-01-01", "membership_end": "2026-01-31"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["message"] == "Membership renewed"
    assert body["student"]["status"] == "active"


def test_delete_then_get_is_404(staff):
    staff.post("/students", json=NEW_STUDENT)

    resp = staff.delete("/students/1")

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Student deleted"
    assert staff.get("/students/1").status_code == 404


def test_lists_and_branch_filter(staff):
    staff.post("/students", json=NEW_STUDENT)
    staff.post("/students", json={**NEW_STUDENT, "name": "Bela", "branch_id": 2, "seat_id": None})

    assert len(staff.get("/students").get_json()["students"]) == 2
    assert [s["name"] for s in staff.get("/students?branchId=2").get_json()["students"]] == ["Bela"]
    assert [s["name"] for s in staff.get("/students/active?branchId=abc").get_json()["students"]] == ["Asha Rao", "Bela"]
    assert staff.get("/students/expired").get_json() == {"students": []}
    assert len(staff.get("/students/expiring-soon").get_json()["students"]) == 2


def test_shift_members_and_bad_shift_id(staff):
    staff.post("/students", json=NEW_STUDENT)

    ok = staff.get("/students/shift/1?status=active&search=asha")
    bad = staff.get("/students/shift/abc")

    assert [s["name"] for s in ok.get_json()["students"]] == ["Asha Rao"]
    assert bad.status_code == 400
    assert bad.get_json()["message"] == "Invalid Shift ID"


def test_history_endpoint(staff):
    staff.post("/students", json=NEW_STUDENT)
    staff.put("/students/1", json={**NEW_STUDENT, "name": "Asha R."})

    rows = staff.get("/students/1/history").get_json()["history"]

    assert [r["name"] for r in rows] == ["Asha R.", "Asha Rao"]
    assert rows[0]["seat_id"] == 1


def test_dashboard_stats_for_admin(admin, staff, stats):
    resp = admin.get("/students/stats/dashboard?branchId=2")

    assert resp.get_json() == {
        "totalCollection": 5000.0,
        "totalDue": 1200.5,
        "totalExpense": 1800.0,
        "profitLoss": 3200.0,
    }
    assert stats.calls[-1]["branch_id"] == 2
    assert staff.get("/students/stats/dashboard").status_code == 403


def test_unexpected_error_is_500(admin, container, monkeypatch):
    def boom(**_):
        raise RuntimeError("db down")

    monkeypatch.setattr(container.membership_service, "list_students", boom)

    resp = admin.get("/students")

    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Server error", "error": "db down"}


def test_non_ascii_digit_branch_is_ignored(staff):
    staff.post("/students", json=NEW_STUDENT)

    resp = staff.get("/students?branchId=²")

    assert resp.status_code == 200
    assert [s["name"] for s in resp.get_json()["students"]] == ["Asha Rao"]


def test_create_with_unknown_branch_is_400(staff):
    resp = staff.post("/students", json={**NEW_STUDENT, "branch_id": 99})

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Branch with ID 99 does not exist"}


def test_create_with_oversized_fee_is_400(staff):
    resp = staff.post("/students", json={**NEW_STUDENT, "total_fee": "100000000"})

    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("Total fee must not exceed")
