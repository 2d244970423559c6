from __future__ import annotations

from typing import Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Shift
from .repository import ShiftRepository


def _row_to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["id"]),
        title=r["title"],
        time=str(r["time"]) if r.get("time") is not None else None,
        event_date=r.get("event_date"),
        description=r.get("description"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, cur):
        self._cur = cur

    def list_all(self) -> Sequence[Shift]:
        self._cur.execute(
            """
            SELECT id, title, description, time, event_date
            FROM schedules
            ORDER BY id
            """
        )
        return [_row_to_shift(r) for r in fetchall(self._cur)]

    def exists(self, shift_id: int) -> bool:
        self._cur.execute("SELECT 1 AS ok FROM schedules WHERE id=%s", (int(shift_id),))
        return fetchone(self._cur) is not None
