from __future__ import annotations

import pytest

from src.library_seats.library_seats.main import create_app

from tests.fakes import build_db, enroll, make_service, make_container


@pytest.fixture
def db():
    db = build_db()
    svc, _ = make_service(db)
    enroll(svc, name="Chitra", phone="900001", membership_end="2026-02-10", seat_id=1, shift_ids=[1])
    enroll(svc, name="Arjun", phone="900002", membership_end="2026-06-20")
    enroll(svc, name="Kiran", phone="900003", membership_end="2026-01-05", branch_id=2)
    return db


def _client(monkeypatch, db, role):
    monkeypatch.setenv("APP_ENV", "testing")
    client = create_app(make_container(db)).test_client()
    with client.session_transaction() as sess:
        sess.update({"user_id": 1, "name": "Tester", "role": role})
    return client


def test_expired_page_lists_only_expired(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    html = client.get("/admin/memberships/expired").get_data(as_text=True)

    assert "Chitra" in html
    assert "Kiran" in html
    assert "Arjun" not in html
    assert "Renew" not in html


def test_expired_page_search(monkeypatch, db):
    client = _client(monkeypatch, db, "admin")

    html = client.get("/admin/memberships/expired?q=900003").get_data(as_text=True)

    assert "Kiran" in html
    assert "Chitra" not in html
    assert "Renew" in html


def test_expired_csv_export(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    resp = client.get("/admin/memberships/expired?format=csv")

    assert resp.mimetype == "text/csv"
    lines = resp.get_data(as_text=True).lstrip("\ufeff").splitlines()
    assert lines[0] == "id,name,email,phone,branch_name,membership_end,due_amount,remark"
    assert [line.split(",")[1] for line in lines[1:]] == ["Chitra", "Kiran"]


def test_renew_page_is_admin_only(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    assert client.get("/admin/students/1/renew").status_code == 403


def test_renew_page_defaults_and_submit(monkeypatch, db):
    client = _client(monkeypatch, db, "admin")

    html = client.get("/admin/students/1/renew").get_data(as_text=True)
    assert 'name="membership_start"' in html
    assert "Chitra" in html

    resp = client.post(
        "/admin/students/1/renew",
        data={
            "membership_start": "2026-03-15",
            "membership_end": "2026-04-15",
            "email": "chitra@example.com",
            "phone": "900001",
            "shift_id": "1",
            "seat_id": "1",
            "total_fee": "1000",
            "cash": "1000",
        },
    )

    assert resp.status_code == 302
    assert db.students[1].membership_end.isoformat() == "2026-04-15"
    assert db.students[1].email == "chitra@example.com"


def test_renew_page_shows_form_errors(monkeypatch, db):
    client = _client(monkeypatch, db, "admin")

    resp = client.post("/admin/students/1/renew", data={"membership_start": "2026-03-15"})

    assert resp.status_code == 200
    assert "Please fill all required fields" in resp.get_data(as_text=True)
    assert db.students[1].membership_end.isoformat() == "2026-02-10"


def test_edit_page_updates_student(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    resp = client.post(
        "/admin/students/2/edit",
        data={
            "name": "Arjun K",
            "email": "arjun@example.com",
            "phone": "900002",
            "address": "5 Lake Road",
            "branch_id": "1",
            "membership_start": "2026-03-01",
            "membership_end": "2026-06-20",
            "total_fee": "800",
            "cash": "500",
            "online": "100",
            "shift_id": "2",
            "seat_id": "2",
        },
    )

    assert resp.status_code == 302
    s = db.students[2]
    assert s.name == "Arjun K"
    assert s.amount_paid == 600
    assert s.due_amount == 200
    assert [(a[1], a[2]) for a in db.assignments if a[3] == 2] == [(2, 2)]


def test_edit_page_rejects_bad_email(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    resp = client.post("/admin/students/2/edit", data={"name": "Arjun", "email": "nope"})

    assert "Please enter a valid email address" in resp.get_data(as_text=True)
    assert db.students[2].name == "Arjun"


def test_delete_from_page(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    resp = client.post("/admin/students/3/delete")

    assert resp.status_code == 302
    assert 3 not in db.students


def test_expired_page_ignores_non_ascii_digit_branch(monkeypatch, db):
    client = _client(monkeypatch, db, "staff")

    resp = client.get("/admin/memberships/expired?branch_id=²")

    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Chitra" in html
    assert "Kiran" in html
