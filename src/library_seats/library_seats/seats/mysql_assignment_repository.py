from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.mysql_base import fetchall, fetchone, is_duplicate_key
from ..students.model import SeatAssignmentView
from .repository import AssignmentRepository


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def is_taken(self, *, seat_id: int, shift_id: int, exclude_student_id: Optional[int] = None) -> bool:
        if exclude_student_id is None:
            self._cur.execute(
                "SELECT 1 AS ok FROM seat_assignments WHERE seat_id=%s AND shift_id=%s",
                (int(seat_id), int(shift_id)),
            )
        else:
            self._cur.execute(
                "SELECT 1 AS ok FROM seat_assignments WHERE seat_id=%s AND shift_id=%s AND student_id<>%s",
                (int(seat_id), int(shift_id), int(exclude_student_id)),
            )
        return fetchone(self._cur) is not None

    def add(self, *, seat_id: int, shift_id: int, student_id: int) -> bool:
        try:
            self._cur.execute(
                "INSERT INTO seat_assignments(seat_id, shift_id, student_id) VALUES(%s,%s,%s)",
                (int(seat_id), int(shift_id), int(student_id)),
            )
        except IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise
        return True

    def delete_for_student(self, student_id: int) -> int:
        self._cur.execute("DELETE FROM seat_assignments WHERE student_id=%s", (int(student_id),))
        return int(self._cur.rowcount)

    def list_for_student(self, student_id: int) -> Sequence[SeatAssignmentView]:
        self._cur.execute(
            """
            SELECT sa.seat_id, sa.shift_id, seats.seat_number, sch.title AS shift_title
            FROM seat_assignments sa
            LEFT JOIN seats ON seats.id = sa.seat_id
            LEFT JOIN schedules sch ON sch.id = sa.shift_id
            WHERE sa.student_id=%s
            ORDER BY sa.id
            """,
            (int(student_id),),
        )
        return [
            SeatAssignmentView(
                seat_id=int(r["seat_id"]),
                shift_id=int(r["shift_id"]),
                seat_number=r.get("seat_number"),
                shift_title=r.get("shift_title"),
            )
            for r in fetchall(self._cur)
        ]
