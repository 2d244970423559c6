from __future__ import annotations

from decimal import Decimal

import pytest

from src.library_seats.library_seats.core.enums import MembershipStatus
from src.library_seats.library_seats.core.exceptions import ConflictError, NotFoundError, ValidationError

from tests.fakes import enroll, make_service


def test_renew_is_active_even_with_past_end_date():
    svc, uow = make_service()
    sid = enroll(svc, membership_end="2026-02-28").student.student_id

    result = svc.renew_membership(sid, membership_start="2026-01-01", membership_end="2026-01-31")

    assert result.status == MembershipStatus.ACTIVE
    assert uow.db.history[-1].status == MembershipStatus.ACTIVE


def test_renew_payment_is_cash_plus_online():
    svc, _ = make_service()
    sid = enroll(svc, total_fee="1000", cash="900", online="100").student.student_id

    result = svc.renew_membership(
        sid, membership_start="2026-04-01", membership_end="2026-04-30", cash="300", online="150.50"
    )

    s = result.student
    assert s.amount_paid == Decimal("450.50")
    assert s.due_amount == Decimal("549.50")
    assert s.total_fee == Decimal("1000")


def test_renew_without_payment_starts_from_zero():
    svc, _ = make_service()
    sid = enroll(svc, total_fee="1000", cash="900", online="100").student.student_id

    s = svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30").student

    assert (s.cash, s.online, s.amount_paid, s.due_amount) == (0, 0, 0, Decimal("1000"))


def test_renew_keeps_contact_when_not_given_and_replaces_remark():
    svc, _ = make_service()
    sid = enroll(svc, remark="old note").student.student_id

    s = svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30").student

    assert s.email == "asha@example.com"
    assert s.phone == "9876500001"
    assert s.branch_id == 1
    assert s.remark is None


def test_renew_overrides_contact_and_fees():
    svc, _ = make_service()
    sid = enroll(svc).student.student_id

    s = svc.renew_membership(
        sid,
        membership_start="2026-04-01",
        membership_end="2026-04-30",
        email="new@example.com",
        phone="111",
        branch_id="2",
        total_fee="1500",
        security_money="0",
        remark="renewed",
    ).student

    assert (s.email, s.phone, s.branch_id, s.remark) == ("new@example.com", "111", 2, "renewed")
    assert s.total_fee == Decimal("1500")
    assert s.security_money == Decimal("0")
    assert s.membership_end.isoformat() == "2026-04-30"


def test_renew_without_seat_keeps_assignments():
    svc, uow = make_service()
    sid = enroll(svc, seat_id=1, shift_ids=[1]).student.student_id

    svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", shift_ids=[2])

    assert [(a[1], a[2]) for a in uow.db.assignments] == [(1, 1)]


def test_renew_with_seat_replaces_assignments():
    svc, uow = make_service()
    sid = enroll(svc, seat_id=1, shift_ids=[1]).student.student_id

    svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", seat_id=2, shift_ids=[2])

    assert [(a[1], a[2]) for a in uow.db.assignments] == [(2, 2)]
    assert (uow.db.history[-1].seat_id, uow.db.history[-1].shift_id) == (2, 2)


def test_renew_onto_held_seat_conflicts_and_changes_nothing():
    svc, uow = make_service()
    enroll(svc, name="Holder", seat_id=2, shift_ids=[2])
    sid = enroll(svc, name="Renewer", membership_end="2026-03-01").student.student_id

    with pytest.raises(ConflictError, match="Seat is already assigned for shift 2"):
        svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", seat_id=2, shift_ids=[2])

    assert uow.db.students[sid].membership_end.isoformat() == "2026-03-01"
    assert len(uow.db.history) == 2


def test_renew_checks_seat_exists():
    svc, _ = make_service()
    sid = enroll(svc).student.student_id

    with pytest.raises(ConflictError, match="Seat with ID 77 does not exist"):
        svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", seat_id=77, shift_ids=[1])


def test_renew_always_appends_history():
    svc, uow = make_service()
    sid = enroll(svc).student.student_id

    svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30")
    svc.renew_membership(sid, membership_start="2026-05-01", membership_end="2026-05-31")

    assert len(uow.db.history) == 3


@pytest.mark.parametrize("start,end", [("", "2026-04-30"), ("2026-04-01", None)])
def test_renew_requires_both_dates(start, end):
    svc, _ = make_service()
    sid = enroll(svc).student.student_id

    with pytest.raises(ValidationError, match="membership_start and membership_end are required"):
        svc.renew_membership(sid, membership_start=start, membership_end=end)


def test_renew_missing_student():
    svc, _ = make_service()

    with pytest.raises(NotFoundError):
        svc.renew_membership(5, membership_start="2026-04-01", membership_end="2026-04-30")


def test_renew_rejects_negative_online():
    svc, _ = make_service()
    sid = enroll(svc).student.student_id

    with pytest.raises(ValidationError, match="Online payment must be a valid non-negative number"):
        svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", online="-5")


def test_renew_unknown_branch_is_rejected():
    svc, uow = make_service()
    sid = enroll(svc, membership_end="2026-03-01").student.student_id

    with pytest.raises(ValidationError, match="Branch with ID 7 does not exist"):
        svc.renew_membership(sid, membership_start="2026-04-01", membership_end="2026-04-30", branch_id="7")

    assert uow.db.students[sid].membership_end.isoformat() == "2026-03-01"
    assert len(uow.db.history) == 1


def test_renew_payment_total_must_fit_column():
    svc, _ = make_service()
    sid = enroll(svc).student.student_id

    with pytest.raises(ValidationError, match="Amount paid must not exceed"):
        svc.renew_membership(
            sid, membership_start="2026-04-01", membership_end="2026-04-30", cash="60000000", online="50000000"
        )
