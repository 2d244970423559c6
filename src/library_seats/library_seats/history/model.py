from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import MembershipStatus


@dataclass(frozen=True)
class MembershipSnapshot:
    """One append-only row of student_membership_history."""

    student_id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    membership_start: date
    membership_end: date
    status: MembershipStatus
    total_fee: Decimal
    amount_paid: Decimal
    due_amount: Decimal
    cash: Decimal
    online: Decimal
    security_money: Decimal
    remark: str
    seat_id: Optional[int]
    shift_id: Optional[int]
    branch_id: Optional[int]
    history_id: Optional[int] = None
    changed_at: Optional[datetime] = None
