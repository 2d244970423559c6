from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Branch
from .repository import BranchRepository


class MySQLBranchRepository(BranchRepository):
    def __init__(self, cur):
        self._cur = cur

    def list_all(self) -> Sequence[Branch]:
        self._cur.execute("SELECT id, name, code FROM branches ORDER BY name")
        return [Branch(branch_id=int(r["id"]), name=r["name"], code=r.get("code")) for r in fetchall(self._cur)]

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        self._cur.execute("SELECT id, name, code FROM branches WHERE id=%s", (int(branch_id),))
        r = fetchone(self._cur)
        if not r:
            return None
        return Branch(branch_id=int(r["id"]), name=r["name"], code=r.get("code"))
