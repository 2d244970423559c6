from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Protocol

from ..branches.mysql_branch_repository import MySQLBranchRepository
from ..branches.repository import BranchRepository
from ..history.mysql_history_repository import MySQLHistoryRepository
from ..history.repository import HistoryRepository
from ..seats.mysql_assignment_repository import MySQLAssignmentRepository
from ..seats.mysql_seat_repository import MySQLSeatRepository
from ..seats.repository import AssignmentRepository, SeatRepository
from ..shifts.mysql_shift_repository import MySQLShiftRepository
from ..shifts.repository import ShiftRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from ..students.repository import StudentRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor


@dataclass(frozen=True)
class Transaction:
    """Repositories bound to one connection/cursor.

    Everything done through a Transaction is committed together when the
    ``begin()`` block exits normally and rolled back otherwise.
    """

    students: StudentRepository
    seats: SeatRepository
    shifts: ShiftRepository
    branches: BranchRepository
    assignments: AssignmentRepository
    history: HistoryRepository


class UnitOfWork(Protocol):
    def begin(self) -> ContextManager[Transaction]:
        raise NotImplementedError


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def begin(self) -> Iterator[Transaction]:
        with db_cursor(self._conn_factory) as (conn, cur):
            conn.start_transaction()
            yield Transaction(
                students=MySQLStudentRepository(cur),
                seats=MySQLSeatRepository(cur),
                shifts=MySQLShiftRepository(cur),
                branches=MySQLBranchRepository(cur),
                assignments=MySQLAssignmentRepository(cur),
                history=MySQLHistoryRepository(cur),
            )
