from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import MembershipStatus


@dataclass(frozen=True)
class SeatAssignmentView:
    seat_id: int
    shift_id: int
    seat_number: Optional[str] = None
    shift_title: Optional[str] = None


@dataclass(frozen=True)
class Student:
    """Domain entity: a library member.

    ``status`` is not stored; see ``membership_status``.
    """

    student_id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    branch_id: Optional[int]
    membership_start: Optional[date]
    membership_end: Optional[date]
    total_fee: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    due_amount: Decimal = Decimal("0")
    cash: Decimal = Decimal("0")
    online: Decimal = Decimal("0")
    security_money: Decimal = Decimal("0")
    remark: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    branch_name: Optional[str] = None
    seat_number: Optional[str] = None
    assignments: Sequence[SeatAssignmentView] = field(default_factory=tuple)


@dataclass(frozen=True)
class StudentValues:
    """Column values written by create/update/renew."""

    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    branch_id: Optional[int]
    membership_start: date
    membership_end: date
    total_fee: Decimal
    amount_paid: Decimal
    due_amount: Decimal
    cash: Decimal
    online: Decimal
    security_money: Decimal
    remark: Optional[str] = None
    profile_image_url: Optional[str] = None


def membership_status(membership_end: Optional[date], today: date) -> MembershipStatus:
    """Expired once the end date is strictly before today."""
    if membership_end is not None and membership_end < today:
        return MembershipStatus.EXPIRED
    return MembershipStatus.ACTIVE


@dataclass(frozen=True)
class MembershipResult:
    """A student together with the status reported to the caller."""

    student: Student
    status: MembershipStatus
