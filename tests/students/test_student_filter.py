from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.library_seats.library_seats.core.enums import MembershipStatus
from src.library_seats.library_seats.students.model import MembershipResult, SeatAssignmentView, Student
from src.library_seats.library_seats.students.queries import StudentFilter
from src.library_seats.library_seats.students.serializers import student_summary_to_dict, student_to_dict

TODAY = date(2026, 3, 15)


def test_empty_filter_matches_everything():
    assert StudentFilter(today=TODAY).where() == ("1=1", ())


def test_expired_branch_filter_is_parameterised():
    sql, params = StudentFilter(today=TODAY, status=MembershipStatus.EXPIRED, branch_id=3).where()

    assert sql == "1=1 AND s.membership_end < %s AND s.branch_id=%s"
    assert params == (TODAY, 3)


def test_expiring_window_uses_both_bounds():
    sql, params = StudentFilter(
        today=TODAY,
        status=MembershipStatus.ACTIVE,
        ends_on_or_before=date(2026, 4, 14),
    ).where()

    assert "s.membership_end >= %s" in sql
    assert "s.membership_end <= %s" in sql
    assert params == (TODAY, date(2026, 4, 14))


def test_search_escapes_like_wildcards():
    sql, params = StudentFilter(today=TODAY, search=" 50%_off ").where()

    assert "(s.name LIKE %s OR s.phone LIKE %s)" in sql
    assert params == ("%50\\%\\_off%", "%50\\%\\_off%")


def test_shift_filter_targets_assignment_alias():
    sql, params = StudentFilter(today=TODAY, shift_id=2).where()

    assert "sa.shift_id=%s" in sql
    assert params == (2,)


def test_ordering_whitelist():
    assert StudentFilter(today=TODAY).order() == "s.name ASC, s.id ASC"
    assert StudentFilter(today=TODAY, order_by="membership_end").order().startswith("s.membership_end")
    with pytest.raises(ValueError):
        StudentFilter(today=TODAY, order_by="name; DROP TABLE students").order()


def _student(**kw) -> Student:
    data = dict(
        student_id=7,
        name="Asha",
        email="asha@example.com",
        phone="1",
        address="x",
        branch_id=1,
        membership_start=date(2026, 3, 1),
        membership_end=date(2026, 3, 31),
        total_fee=Decimal("1000.50"),
        amount_paid=Decimal("0"),
        due_amount=Decimal("1000.50"),
        created_at=datetime(2026, 3, 1, 9, 30),
    )
    data.update(kw)
    return Student(**data)


def test_student_dict_numbers_dates_and_blank_remark():
    out = student_to_dict(MembershipResult(_student(), MembershipStatus.ACTIVE))

    assert out["total_fee"] == 1000.5
    assert out["cash"] == 0.0
    assert out["membership_end"] == "2026-03-31"
    assert out["created_at"] == "2026-03-01"
    assert out["remark"] == ""
    assert out["status"] == "active"
    assert "assignments" not in out


def test_student_dict_with_assignments_and_branch():
    s = _student(branch_name="Main", assignments=(SeatAssignmentView(1, 2, "A1", "Afternoon"),))

    out = student_to_dict(MembershipResult(s, MembershipStatus.EXPIRED), include_assignments=True)

    assert out["branch_name"] == "Main"
    assert out["assignments"] == [{"seat_id": 1, "shift_id": 2, "seat_number": "A1", "shift_title": "Afternoon"}]


def test_summary_dict_fields():
    out = student_summary_to_dict(MembershipResult(_student(seat_number="B4"), MembershipStatus.ACTIVE))

    assert set(out) == {"id", "name", "phone", "membership_end", "created_at", "status", "seat_number"}
    assert out["seat_number"] == "B4"
