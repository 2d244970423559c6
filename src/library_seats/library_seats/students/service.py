from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import (
    check_money_range,
    first_or_none,
    is_blank,
    parse_date_field,
    parse_id_list,
    parse_money,
    parse_optional_id,
    require_fields,
)
from ..core.constants import DEFAULT_EXPIRING_SOON_DAYS
from ..core.enums import MembershipStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.unit_of_work import Transaction, UnitOfWork
from ..history.model import MembershipSnapshot
from .model import MembershipResult, Student, StudentValues, membership_status
from .queries import StudentFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeatRequest:
    """Seat + shifts asked for by a write.

    Assignments are only touched when both a seat and at least one shift are given.
    """

    seat_id: Optional[int]
    shift_ids: tuple[int, ...]

    @classmethod
    def parse(cls, seat_id: Any, shift_ids: Any) -> "SeatRequest":
        ids = parse_id_list(shift_ids, "shift_ids")
        return cls(
            seat_id=parse_optional_id(seat_id, "seat_id"),
            shift_ids=tuple(dict.fromkeys(ids)),
        )

    @property
    def requested(self) -> bool:
        return self.seat_id is not None and len(self.shift_ids) > 0

    @property
    def first_shift_id(self) -> Optional[int]:
        return first_or_none(self.shift_ids) if self.requested else None


def _snapshot(student: Student, *, status: MembershipStatus, seats: SeatRequest) -> MembershipSnapshot:
    return MembershipSnapshot(
        student_id=student.student_id,
        name=student.name,
        email=student.email,
        phone=student.phone,
        address=student.address,
        membership_start=student.membership_start,
        membership_end=student.membership_end,
        status=status,
        total_fee=student.total_fee,
        amount_paid=student.amount_paid,
        due_amount=student.due_amount,
        cash=student.cash,
        online=student.online,
        security_money=student.security_money,
        remark=student.remark or "",
        seat_id=seats.seat_id if seats.requested else None,
        shift_id=seats.first_shift_id,
        branch_id=student.branch_id,
    )


def _optional_text(value: Any) -> Optional[str]:
    return None if is_blank(value) else str(value).strip()


class MembershipService:
    """Student enrollment, edits, renewals and removals.

    Every write runs inside one unit-of-work transaction: the student row, its
    seat assignments and its membership history change together or not at all.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        clock: Callable[[], date] = today_local,
        expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS,
    ):
        self._uow = uow
        self._clock = clock
        self._expiring_soon_days = int(expiring_soon_days)

    # -------- reference checks --------
    @staticmethod
    def _check_branch(tx: Transaction, branch_id: Optional[int]) -> None:
        if branch_id is not None and tx.branches.get_by_id(branch_id) is None:
            raise ValidationError(f"Branch with ID {branch_id} does not exist")

    @staticmethod
    def _check_seat_request(tx: Transaction, seats: SeatRequest, *, student_id: Optional[int] = None) -> None:
        if not seats.requested:
            return

        if not tx.seats.exists(seats.seat_id):
            raise ConflictError(f"Seat with ID {seats.seat_id} does not exist")

        for shift_id in seats.shift_ids:
            if not tx.shifts.exists(shift_id):
                raise ConflictError(f"Shift with ID {shift_id} does not exist")

        for shift_id in seats.shift_ids:
            if tx.assignments.is_taken(seat_id=seats.seat_id, shift_id=shift_id, exclude_student_id=student_id):
                raise ConflictError(f"Seat is already assigned for shift {shift_id}")

    @staticmethod
    def _assign(tx: Transaction, student_id: int, seats: SeatRequest) -> None:
        if not seats.requested:
            return
        for shift_id in seats.shift_ids:
            # The unique (seat_id, shift_id) key catches a concurrent writer that passed the check.
            if not tx.assignments.add(seat_id=seats.seat_id, shift_id=shift_id, student_id=student_id):
                raise ConflictError(f"Seat is already assigned for shift {shift_id}")

    # -------- writes --------
    def create_student(
        self,
        *,
        name: Any,
        branch_id: Any,
        membership_start: Any,
        membership_end: Any,
        email: Any = None,
        phone: Any = None,
        address: Any = None,
        total_fee: Any = None,
        amount_paid: Any = None,
        seat_id: Any = None,
        shift_ids: Any = None,
        cash: Any = None,
        online: Any = None,
        security_money: Any = None,
        remark: Any = None,
        profile_image_url: Any = None,
    ) -> MembershipResult:
        missing = "Required fields missing (name, branch_id, membership_start, membership_end)"
        require_fields(
            {
                "name": name,
                "branch_id": branch_id,
                "membership_start": membership_start,
                "membership_end": membership_end,
            },
            missing,
        )
        branch = parse_optional_id(branch_id, "branch_id")
        if branch is None:
            raise ValidationError(missing)
        start = parse_date_field(membership_start, "membership_start")
        end = parse_date_field(membership_end, "membership_end")
        seats = SeatRequest.parse(seat_id, shift_ids)

        fee = parse_money(total_fee, "Total fee")
        paid = parse_money(amount_paid, "Amount paid")
        cash_value = parse_money(cash, "Cash")
        online_value = parse_money(online, "Online payment")
        security_value = parse_money(security_money, "Security money")

        values = StudentValues(
            name=str(name).strip(),
            email=_optional_text(email),
            phone=_optional_text(phone),
            address=_optional_text(address),
            branch_id=branch,
            membership_start=start,
            membership_end=end,
            total_fee=fee,
            amount_paid=paid,
            due_amount=fee - paid,
            cash=cash_value,
            online=online_value,
            security_money=security_value,
            remark=_optional_text(remark),
            profile_image_url=_optional_text(profile_image_url),
        )
        status = membership_status(end, self._clock())

        with self._uow.begin() as tx:
            self._check_branch(tx, branch)
            self._check_seat_request(tx, seats)
            student_id = tx.students.insert(values)
            self._assign(tx, student_id, seats)
            student = tx.students.get(student_id)
            tx.history.append(_snapshot(student, status=status, seats=seats))

        logger.info("Created student id=%s seat=%s shifts=%s", student_id, seats.seat_id, list(seats.shift_ids))
        return MembershipResult(student=student, status=status)

    def update_student(
        self,
        student_id: int,
        *,
        name: Any,
        email: Any,
        phone: Any,
        address: Any,
        branch_id: Any,
        membership_start: Any,
        membership_end: Any,
        total_fee: Any = None,
        amount_paid: Any = None,
        seat_id: Any = None,
        shift_ids: Any = None,
        cash: Any = None,
        online: Any = None,
        security_money: Any = None,
        remark: Any = None,
    ) -> MembershipResult:
        missing = "Required fields missing (name, email, phone, address, branch_id, membership_start, membership_end)"
        require_fields(
            {
                "name": name,
                "email": email,
                "phone": phone,
                "address": address,
                "branch_id": branch_id,
                "membership_start": membership_start,
                "membership_end": membership_end,
            },
            missing,
        )
        branch = parse_optional_id(branch_id, "branch_id")
        if branch is None:
            raise ValidationError(missing)
        start = parse_date_field(membership_start, "membership_start")
        end = parse_date_field(membership_end, "membership_end")
        seats = SeatRequest.parse(seat_id, shift_ids)
        status = membership_status(end, self._clock())

        with self._uow.begin() as tx:
            current = tx.students.get(int(student_id), for_update=True)
            if not current:
                raise NotFoundError("Student not found")
            if tx.history.latest_for_student(current.student_id) is None:
                raise NotFoundError("No membership history found for this student")
            self._check_branch(tx, branch)

            fee = parse_money(total_fee, "Total fee", default=current.total_fee)
            paid = parse_money(amount_paid, "Amount paid", default=current.amount_paid)
            cash_value = parse_money(cash, "Cash", default=current.cash)
            online_value = parse_money(online, "Online payment", default=current.online)
            security_value = parse_money(security_money, "Security money", default=current.security_money)

            self._check_seat_request(tx, seats, student_id=current.student_id)

            tx.students.update(
                current.student_id,
                StudentValues(
                    name=str(name).strip(),
                    email=str(email).strip(),
                    phone=str(phone).strip(),
                    address=str(address).strip(),
                    branch_id=branch,
                    membership_start=start,
                    membership_end=end,
                    total_fee=fee,
                    amount_paid=paid,
                    due_amount=fee - paid,
                    cash=cash_value,
                    online=online_value,
                    security_money=security_value,
                    remark=_optional_text(remark),
                ),
            )

            # Full replace: anything not re-specified loses its seat.
            tx.assignments.delete_for_student(current.student_id)
            self._assign(tx, current.student_id, seats)

            student = tx.students.get(current.student_id)
            tx.history.append(_snapshot(student, status=status, seats=seats))

        logger.info("Updated student id=%s seat=%s shifts=%s", student_id, seats.seat_id, list(seats.shift_ids))
        return MembershipResult(student=student, status=status)

    def renew_membership(
        self,
        student_id: int,
        *,
        membership_start: Any,
        membership_end: Any,
        email: Any = None,
        phone: Any = None,
        branch_id: Any = None,
        seat_id: Any = None,
        shift_ids: Any = None,
        total_fee: Any = None,
        cash: Any = None,
        online: Any = None,
        security_money: Any = None,
        remark: Any = None,
    ) -> MembershipResult:
        """Start a new membership period.

        The renewed membership is reported as active regardless of the end
        date given, and a new history row is always appended. Seat assignments
        are replaced only when a seat and shifts are supplied.
        """
        if is_blank(membership_start) or is_blank(membership_end):
            raise ValidationError("membership_start and membership_end are required")

        start = parse_date_field(membership_start, "membership_start")
        end = parse_date_field(membership_end, "membership_end")
        branch = parse_optional_id(branch_id, "branch_id")
        seats = SeatRequest.parse(seat_id, shift_ids)
        cash_value = parse_money(cash, "Cash")
        online_value = parse_money(online, "Online payment")
        paid = check_money_range(cash_value + online_value, "Amount paid")

        with self._uow.begin() as tx:
            current = tx.students.get(int(student_id), for_update=True)
            if not current:
                raise NotFoundError("Student not found")

            fee = parse_money(total_fee, "Total fee", default=current.total_fee)
            security_value = parse_money(security_money, "Security money", default=current.security_money)

            self._check_branch(tx, branch)
            self._check_seat_request(tx, seats, student_id=current.student_id)

            tx.students.update(
                current.student_id,
                StudentValues(
                    name=current.name,
                    email=_optional_text(email) or current.email,
                    phone=_optional_text(phone) or current.phone,
                    address=current.address,
                    branch_id=branch or current.branch_id,
                    membership_start=start,
                    membership_end=end,
                    total_fee=fee,
                    amount_paid=paid,
                    due_amount=fee - paid,
                    cash=cash_value,
                    online=online_value,
                    security_money=security_value,
                    remark=_optional_text(remark),
                ),
            )

            if seats.requested:
                tx.assignments.delete_for_student(current.student_id)
                self._assign(tx, current.student_id, seats)

            student = tx.students.get(current.student_id)
            tx.history.append(_snapshot(student, status=MembershipStatus.ACTIVE, seats=seats))

        logger.info("Renewed membership student id=%s until %s", student_id, end.isoformat())
        return MembershipResult(student=student, status=MembershipStatus.ACTIVE)

    def delete_student(self, student_id: int) -> MembershipResult:
        with self._uow.begin() as tx:
            current = tx.students.get(int(student_id), for_update=True)
            if not current:
                raise NotFoundError("Student not found")

            tx.assignments.delete_for_student(current.student_id)
            tx.history.delete_for_student(current.student_id)
            tx.students.delete(current.student_id)

        logger.info("Deleted student id=%s", student_id)
        return MembershipResult(student=current, status=membership_status(current.membership_end, self._clock()))

    # -------- reads --------
    def _results(self, students: Sequence[Student], today: date) -> list[MembershipResult]:
        return [MembershipResult(student=s, status=membership_status(s.membership_end, today)) for s in students]

    def list_students(self, *, branch_id: Optional[int] = None) -> list[MembershipResult]:
        today = self._clock()
        with self._uow.begin() as tx:
            rows = tx.students.list_summaries(StudentFilter(today=today, branch_id=branch_id))
        return self._results(rows, today)

    def list_active(self, *, branch_id: Optional[int] = None) -> list[MembershipResult]:
        today = self._clock()
        flt = StudentFilter(today=today, branch_id=branch_id, status=MembershipStatus.ACTIVE)
        with self._uow.begin() as tx:
            rows = tx.students.list_detailed(flt)
        return self._results(rows, today)

    def list_expired(self, *, branch_id: Optional[int] = None, search: Optional[str] = None) -> list[MembershipResult]:
        today = self._clock()
        flt = StudentFilter(today=today, branch_id=branch_id, status=MembershipStatus.EXPIRED, search=search or None)
        with self._uow.begin() as tx:
            rows = tx.students.list_detailed(flt)
        return self._results(rows, today)

    def list_expiring_soon(self, *, branch_id: Optional[int] = None) -> list[MembershipResult]:
        today = self._clock()
        flt = StudentFilter(
            today=today,
            branch_id=branch_id,
            status=MembershipStatus.ACTIVE,
            ends_on_or_before=today + timedelta(days=self._expiring_soon_days),
            order_by="membership_end",
        )
        with self._uow.begin() as tx:
            rows = tx.students.list_detailed(flt)
        return self._results(rows, today)

    def get_student(self, student_id: int) -> MembershipResult:
        today = self._clock()
        with self._uow.begin() as tx:
            student = tx.students.get_detail(int(student_id))
            if not student:
                raise NotFoundError("Student not found")
            student = replace(student, assignments=tuple(tx.assignments.list_for_student(student.student_id)))
        return MembershipResult(student=student, status=membership_status(student.membership_end, today))

    def list_for_shift(
        self,
        shift_id: Any,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[MembershipResult]:
        try:
            shift = int(str(shift_id).strip())
        except ValueError:
            raise ValidationError("Invalid Shift ID")

        try:
            status_filter = MembershipStatus(status) if status and status != "all" else None
        except ValueError:
            status_filter = None

        today = self._clock()
        flt = StudentFilter(today=today, shift_id=shift, status=status_filter, search=(search or "").strip() or None)
        with self._uow.begin() as tx:
            rows = tx.students.list_for_shift(flt)
        return self._results(rows, today)

    def membership_history(self, student_id: int) -> Sequence[MembershipSnapshot]:
        with self._uow.begin() as tx:
            if not tx.students.get(int(student_id)):
                raise NotFoundError("Student not found")
            return list(tx.history.list_for_student(int(student_id)))
