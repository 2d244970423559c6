from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MembershipSnapshot


class HistoryRepository(Protocol):
    """Append-only membership history."""

    def append(self, snapshot: MembershipSnapshot) -> int:
        raise NotImplementedError

    def latest_for_student(self, student_id: int) -> Optional[MembershipSnapshot]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[MembershipSnapshot]:
        """Newest first."""

        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> int:
        raise NotImplementedError
