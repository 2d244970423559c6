from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.mysql_base import fetchall, fetchone, to_decimal
from .model import Student, StudentValues
from .queries import StudentFilter
from .repository import StudentRepository

_STUDENT_COLUMNS = """
    s.id, s.name, s.email, s.phone, s.address, s.branch_id,
    s.membership_start, s.membership_end,
    s.total_fee, s.amount_paid, s.due_amount, s.cash, s.online, s.security_money,
    s.remark, s.profile_image_url, s.created_at
"""


def _row_to_student(r: dict, **extra: Any) -> Student:
    return Student(
        student_id=int(r["id"]),
        name=r["name"],
        email=r.get("email"),
        phone=r.get("phone"),
        address=r.get("address"),
        branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
        membership_start=r.get("membership_start"),
        membership_end=r.get("membership_end"),
        total_fee=to_decimal(r.get("total_fee")),
        amount_paid=to_decimal(r.get("amount_paid")),
        due_amount=to_decimal(r.get("due_amount")),
        cash=to_decimal(r.get("cash")),
        online=to_decimal(r.get("online")),
        security_money=to_decimal(r.get("security_money")),
        remark=r.get("remark"),
        profile_image_url=r.get("profile_image_url"),
        created_at=r.get("created_at"),
        **extra,
    )


def _values_params(values: StudentValues) -> tuple:
    return (
        values.name,
        values.email,
        values.phone,
        values.address,
        values.branch_id,
        values.membership_start,
        values.membership_end,
        values.total_fee,
        values.amount_paid,
        values.due_amount,
        values.cash,
        values.online,
        values.security_money,
        values.remark,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get(self, student_id: int, *, for_update: bool = False) -> Optional[Student]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(
            f"SELECT {_STUDENT_COLUMNS} FROM students s WHERE s.id=%s{lock}",
            (int(student_id),),
        )
        r = fetchone(self._cur)
        return _row_to_student(r) if r else None

    def get_detail(self, student_id: int) -> Optional[Student]:
        self._cur.execute(
            f"""
            SELECT {_STUDENT_COLUMNS}, b.name AS branch_name
            FROM students s
            LEFT JOIN branches b ON b.id = s.branch_id
            WHERE s.id=%s
            """,
            (int(student_id),),
        )
        r = fetchone(self._cur)
        return _row_to_student(r, branch_name=r.get("branch_name")) if r else None

    def insert(self, values: StudentValues) -> int:
        self._cur.execute(
            """
            INSERT INTO students(
                name, email, phone, address, branch_id, membership_start, membership_end,
                total_fee, amount_paid, due_amount, cash, online, security_money, remark,
                profile_image_url
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            _values_params(values) + (values.profile_image_url,),
        )
        return int(self._cur.lastrowid)

    def update(self, student_id: int, values: StudentValues) -> None:
        self._cur.execute(
            """
            UPDATE students
            SET name=%s, email=%s, phone=%s, address=%s, branch_id=%s,
                membership_start=%s, membership_end=%s,
                total_fee=%s, amount_paid=%s, due_amount=%s,
                cash=%s, online=%s, security_money=%s, remark=%s
            WHERE id=%s
            """,
            _values_params(values) + (int(student_id),),
        )

    def delete(self, student_id: int) -> bool:
        self._cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
        return self._cur.rowcount > 0

    def list_summaries(self, flt: StudentFilter) -> Sequence[Student]:
        where, params = flt.where()
        self._cur.execute(
            f"""
            SELECT
                {_STUDENT_COLUMNS},
                (SELECT seats.seat_number
                 FROM seat_assignments sa2
                 LEFT JOIN seats ON seats.id = sa2.seat_id
                 WHERE sa2.student_id = s.id
                 ORDER BY sa2.id
                 LIMIT 1) AS seat_number
            FROM students s
            WHERE {where}
            ORDER BY {flt.order()}
            """,
            params,
        )
        return [_row_to_student(r, seat_number=r.get("seat_number")) for r in fetchall(self._cur)]

    def list_detailed(self, flt: StudentFilter) -> Sequence[Student]:
        where, params = flt.where()
        self._cur.execute(
            f"""
            SELECT {_STUDENT_COLUMNS}, b.name AS branch_name
            FROM students s
            LEFT JOIN branches b ON b.id = s.branch_id
            WHERE {where}
            ORDER BY {flt.order()}
            """,
            params,
        )
        return [_row_to_student(r, branch_name=r.get("branch_name")) for r in fetchall(self._cur)]

    def list_for_shift(self, flt: StudentFilter) -> Sequence[Student]:
        where, params = flt.where()
        self._cur.execute(
            f"""
            SELECT DISTINCT {_STUDENT_COLUMNS}
            FROM students s
            JOIN seat_assignments sa ON sa.student_id = s.id
            WHERE {where}
            ORDER BY {flt.order()}
            """,
            params,
        )
        return [_row_to_student(r) for r in fetchall(self._cur)]
