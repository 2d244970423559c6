from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass(frozen=True)
class Seat:
    seat_id: int
    seat_number: str
    branch_id: Optional[int] = None


@dataclass(frozen=True)
class SeatShiftState:
    """Whether a seat is taken for one shift, and by whom."""

    shift_id: int
    shift_title: str
    is_assigned: bool
    student_id: Optional[int] = None
    student_name: Optional[str] = None


@dataclass(frozen=True)
class SeatAvailability:
    seat: Seat
    shifts: Sequence[SeatShiftState] = field(default_factory=tuple)

    def is_free_for(self, shift_id: int, *, student_id: Optional[int] = None) -> bool:
        for s in self.shifts:
            if s.shift_id == shift_id:
                return not s.is_assigned or (student_id is not None and s.student_id == student_id)
        return False
