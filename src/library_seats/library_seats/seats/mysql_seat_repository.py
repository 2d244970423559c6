from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Seat, SeatAvailability, SeatShiftState
from .repository import SeatRepository


class MySQLSeatRepository(SeatRepository):
    def __init__(self, cur):
        self._cur = cur

    def exists(self, seat_id: int) -> bool:
        self._cur.execute("SELECT 1 AS ok FROM seats WHERE id=%s", (int(seat_id),))
        return fetchone(self._cur) is not None

    def list_availability(
        self,
        *,
        shift_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> Sequence[SeatAvailability]:
        seat_clauses = ["1=1"]
        seat_params: list[object] = []
        if branch_id is not None:
            seat_clauses.append("seats.branch_id=%s")
            seat_params.append(int(branch_id))

        self._cur.execute(
            f"""
            SELECT seats.id, seats.seat_number, seats.branch_id
            FROM seats
            WHERE {" AND ".join(seat_clauses)}
            ORDER BY seats.seat_number
            """,
            tuple(seat_params),
        )
        seats = [
            Seat(
                seat_id=int(r["id"]),
                seat_number=str(r["seat_number"]),
                branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
            )
            for r in fetchall(self._cur)
        ]

        shift_clauses = ["1=1"]
        shift_params: list[object] = []
        if shift_id is not None:
            shift_clauses.append("sch.id=%s")
            shift_params.append(int(shift_id))

        self._cur.execute(
            f"""
            SELECT sch.id AS shift_id, sch.title AS shift_title,
                   sa.seat_id, sa.student_id, st.name AS student_name
            FROM schedules sch
            LEFT JOIN seat_assignments sa ON sa.shift_id = sch.id
            LEFT JOIN students st ON st.id = sa.student_id
            WHERE {" AND ".join(shift_clauses)}
            ORDER BY sch.id
            """,
            tuple(shift_params),
        )
        shift_titles: dict[int, str] = {}
        taken: dict[tuple[int, int], tuple[int, Optional[str]]] = {}
        for r in fetchall(self._cur):
            sid = int(r["shift_id"])
            shift_titles[sid] = r["shift_title"]
            if r.get("seat_id") is not None:
                taken[(int(r["seat_id"]), sid)] = (int(r["student_id"]), r.get("student_name"))

        out: list[SeatAvailability] = []
        for seat in seats:
            states = []
            for sid, title in shift_titles.items():
                holder = taken.get((seat.seat_id, sid))
                states.append(
                    SeatShiftState(
                        shift_id=sid,
                        shift_title=title,
                        is_assigned=holder is not None,
                        student_id=holder[0] if holder else None,
                        student_name=holder[1] if holder else None,
                    )
                )
            out.append(SeatAvailability(seat=seat, shifts=tuple(states)))
        return out
