from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentValues
from .queries import StudentFilter


class StudentRepository(Protocol):
    """Student persistence, bound to the caller's transaction."""

    def get(self, student_id: int, *, for_update: bool = False) -> Optional[Student]:
        raise NotImplementedError

    def get_detail(self, student_id: int) -> Optional[Student]:
        """Student joined with its branch name."""

        raise NotImplementedError

    def insert(self, values: StudentValues) -> int:
        raise NotImplementedError

    def update(self, student_id: int, values: StudentValues) -> None:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

    def list_summaries(self, flt: StudentFilter) -> Sequence[Student]:
        """Light rows (id, name, phone, dates, first seat number)."""

        raise NotImplementedError

    def list_detailed(self, flt: StudentFilter) -> Sequence[Student]:
        raise NotImplementedError

    def list_for_shift(self, flt: StudentFilter) -> Sequence[Student]:
        raise NotImplementedError
