from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MembershipStatus
from ..database.mysql_base import fetchall, fetchone, to_decimal
from .model import MembershipSnapshot
from .repository import HistoryRepository

_HISTORY_COLUMNS = """
    id, student_id, name, email, phone, address,
    membership_start, membership_end, status,
    total_fee, amount_paid, due_amount, cash, online, security_money, remark,
    seat_id, shift_id, branch_id, changed_at
"""


def _row_to_snapshot(r: dict) -> MembershipSnapshot:
    return MembershipSnapshot(
        history_id=int(r["id"]),
        student_id=int(r["student_id"]),
        name=r["name"],
        email=r.get("email"),
        phone=r.get("phone"),
        address=r.get("address"),
        membership_start=r["membership_start"],
        membership_end=r["membership_end"],
        status=MembershipStatus(r["status"]),
        total_fee=to_decimal(r.get("total_fee")),
        amount_paid=to_decimal(r.get("amount_paid")),
        due_amount=to_decimal(r.get("due_amount")),
        cash=to_decimal(r.get("cash")),
        online=to_decimal(r.get("online")),
        security_money=to_decimal(r.get("security_money")),
        remark=r.get("remark") or "",
        seat_id=r.get("seat_id"),
        shift_id=r.get("shift_id"),
        branch_id=r.get("branch_id"),
        changed_at=r.get("changed_at"),
    )


class MySQLHistoryRepository(HistoryRepository):
    def __init__(self, cur):
        self._cur = cur

    def append(self, snapshot: MembershipSnapshot) -> int:
        self._cur.execute(
            """
            INSERT INTO student_membership_history(
                student_id, name, email, phone, address,
                membership_start, membership_end, status,
                total_fee, amount_paid, due_amount,
                cash, online, security_money, remark,
                seat_id, shift_id, branch_id,
                changed_at
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,NOW(6))
            """,
            (
                snapshot.student_id,
                snapshot.name,
                snapshot.email,
                snapshot.phone,
                snapshot.address,
                snapshot.membership_start,
                snapshot.membership_end,
                snapshot.status.value,
                snapshot.total_fee,
                snapshot.amount_paid,
                snapshot.due_amount,
                snapshot.cash,
                snapshot.online,
                snapshot.security_money,
                snapshot.remark,
                snapshot.seat_id,
                snapshot.shift_id,
                snapshot.branch_id,
            ),
        )
        return int(self._cur.lastrowid)

    def latest_for_student(self, student_id: int) -> Optional[MembershipSnapshot]:
        self._cur.execute(
            f"""
            SELECT {_HISTORY_COLUMNS}
            FROM student_membership_history
            WHERE student_id=%s
            ORDER BY changed_at DESC, id DESC
            LIMIT 1
            """,
            (int(student_id),),
        )
        r = fetchone(self._cur)
        return _row_to_snapshot(r) if r else None

    def list_for_student(self, student_id: int) -> Sequence[MembershipSnapshot]:
        self._cur.execute(
            f"""
            SELECT {_HISTORY_COLUMNS}
            FROM student_membership_history
            WHERE student_id=%s
            ORDER BY changed_at DESC, id DESC
            """,
            (int(student_id),),
        )
        return [_row_to_snapshot(r) for r in fetchall(self._cur)]

    def delete_for_student(self, student_id: int) -> int:
        self._cur.execute("DELETE FROM student_membership_history WHERE student_id=%s", (int(student_id),))
        return int(self._cur.rowcount)
