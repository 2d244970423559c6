from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..students.model import SeatAssignmentView
from .model import SeatAvailability


class SeatRepository(Protocol):
    def exists(self, seat_id: int) -> bool:
        raise NotImplementedError

    def list_availability(
        self,
        *,
        shift_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> Sequence[SeatAvailability]:
        """Every seat with its per-shift assignment state."""

        raise NotImplementedError


class AssignmentRepository(Protocol):
    def is_taken(self, *, seat_id: int, shift_id: int, exclude_student_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def add(self, *, seat_id: int, shift_id: int, student_id: int) -> bool:
        """Insert one (seat, shift, student) row.

        Returns False when the (seat, shift) pair is already held (unique key).
        """

        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[SeatAssignmentView]:
        raise NotImplementedError
