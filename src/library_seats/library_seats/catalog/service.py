from __future__ import annotations

from typing import Optional, Sequence

from ..branches.model import Branch
from ..database.unit_of_work import UnitOfWork
from ..seats.model import Seat, SeatAvailability
from ..shifts.model import Shift


class CatalogService:
    """Read-only reference data for the student forms: branches, shifts, seats."""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def list_branches(self) -> Sequence[Branch]:
        with self._uow.begin() as tx:
            return list(tx.branches.list_all())

    def list_shifts(self) -> Sequence[Shift]:
        with self._uow.begin() as tx:
            return list(tx.shifts.list_all())

    def list_seats(
        self,
        *,
        shift_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> Sequence[SeatAvailability]:
        with self._uow.begin() as tx:
            return list(tx.seats.list_availability(shift_id=shift_id, branch_id=branch_id))

    def available_seats(
        self,
        shift_id: Optional[int],
        *,
        student_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> Sequence[Seat]:
        """Seats free for ``shift_id``, plus the ones ``student_id`` already holds there.

        Without a shift nothing can be checked, so no seat is offered.
        """
        if shift_id is None:
            return []
        seats = self.list_seats(shift_id=shift_id, branch_id=branch_id)
        return [s.seat for s in seats if s.is_free_for(shift_id, student_id=student_id)]
