from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import MembershipStatus

_ORDERINGS = {
    "name": "s.name ASC, s.id ASC",
    "membership_end": "s.membership_end ASC, s.name ASC",
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass(frozen=True)
class StudentFilter:
    """Typed filter for student list queries.

    ``today`` is passed in (not CURRENT_DATE) so that filtering and the status
    reported for each row agree on the same date.
    """

    today: date
    branch_id: Optional[int] = None
    status: Optional[MembershipStatus] = None
    ends_on_or_before: Optional[date] = None
    shift_id: Optional[int] = None
    search: Optional[str] = None
    order_by: str = "name"

    def where(self) -> tuple[str, tuple]:
        clauses = ["1=1"]
        params: list[object] = []

        if self.shift_id is not None:
            clauses.append("sa.shift_id=%s")
            params.append(int(self.shift_id))
        if self.status == MembershipStatus.ACTIVE:
            clauses.append("s.membership_end >= %s")
            params.append(self.today)
        elif self.status == MembershipStatus.EXPIRED:
            clauses.append("s.membership_end < %s")
            params.append(self.today)
        if self.ends_on_or_before is not None:
            clauses.append("s.membership_end <= %s")
            params.append(self.ends_on_or_before)
        if self.branch_id is not None:
            clauses.append("s.branch_id=%s")
            params.append(int(self.branch_id))
        if self.search:
            clauses.append("(s.name LIKE %s OR s.phone LIKE %s)")
            pattern = _like_pattern(self.search.strip())
            params.extend([pattern, pattern])

        return " AND ".join(clauses), tuple(params)

    def order(self) -> str:
        try:
            return _ORDERINGS[self.order_by]
        except KeyError:
            raise ValueError(f"Unsupported ordering: {self.order_by!r}")
