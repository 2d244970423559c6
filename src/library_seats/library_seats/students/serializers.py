"""Shape domain objects into the JSON the API returns.

Money is returned as numbers (NULL as 0), dates as YYYY-MM-DD.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..history.model import MembershipSnapshot
from .model import MembershipResult, SeatAssignmentView


def money(value: Optional[Decimal]) -> float:
    return float(value or 0)


def assignment_to_dict(a: SeatAssignmentView) -> dict:
    return {
        "seat_id": a.seat_id,
        "shift_id": a.shift_id,
        "seat_number": a.seat_number,
        "shift_title": a.shift_title,
    }


def student_to_dict(result: MembershipResult, *, include_assignments: bool = False) -> dict:
    s = result.student
    out = {
        "id": s.student_id,
        "name": s.name,
        "email": s.email,
        "phone": s.phone,
        "address": s.address,
        "branch_id": s.branch_id,
        "membership_start": format_iso_date(s.membership_start),
        "membership_end": format_iso_date(s.membership_end),
        "status": result.status.value,
        "total_fee": money(s.total_fee),
        "amount_paid": money(s.amount_paid),
        "due_amount": money(s.due_amount),
        "cash": money(s.cash),
        "online": money(s.online),
        "security_money": money(s.security_money),
        "remark": s.remark or "",
        "profile_image_url": s.profile_image_url or "",
        "created_at": format_iso_date(s.created_at),
    }
    if s.branch_name is not None:
        out["branch_name"] = s.branch_name
    if include_assignments:
        out["assignments"] = [assignment_to_dict(a) for a in s.assignments]
    return out


def student_summary_to_dict(result: MembershipResult) -> dict:
    s = result.student
    return {
        "id": s.student_id,
        "name": s.name,
        "phone": s.phone,
        "membership_end": format_iso_date(s.membership_end),
        "created_at": format_iso_date(s.created_at),
        "status": result.status.value,
        "seat_number": s.seat_number,
    }


def shift_member_to_dict(result: MembershipResult) -> dict:
    s = result.student
    return {
        "id": s.student_id,
        "name": s.name,
        "email": s.email,
        "phone": s.phone,
        "membership_end": format_iso_date(s.membership_end),
        "status": result.status.value,
    }


def snapshot_to_dict(h: MembershipSnapshot) -> dict:
    return {
        "id": h.history_id,
        "student_id": h.student_id,
        "name": h.name,
        "email": h.email,
        "phone": h.phone,
        "address": h.address,
        "membership_start": format_iso_date(h.membership_start),
        "membership_end": format_iso_date(h.membership_end),
        "status": h.status.value,
        "total_fee": money(h.total_fee),
        "amount_paid": money(h.amount_paid),
        "due_amount": money(h.due_amount),
        "cash": money(h.cash),
        "online": money(h.online),
        "security_money": money(h.security_money),
        "remark": h.remark,
        "seat_id": h.seat_id,
        "shift_id": h.shift_id,
        "branch_id": h.branch_id,
        "changed_at": h.changed_at.strftime("%Y-%m-%d %H:%M:%S") if h.changed_at else None,
    }
