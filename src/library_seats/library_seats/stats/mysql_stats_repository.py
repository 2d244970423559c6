from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_decimal
from .model import MonthTotals
from .repository import StatsRepository


class MySQLStatsRepository(StatsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def totals(self, *, start: date, end: date, branch_id: Optional[int] = None) -> MonthTotals:
        # created_at is a DATETIME: the end day is included up to midnight.
        student_sql = """
            SELECT COALESCE(SUM(s.amount_paid), 0) AS collection,
                   COALESCE(SUM(s.due_amount), 0) AS due
            FROM students s
            WHERE s.created_at >= %s AND s.created_at < %s
        """
        student_params: list[object] = [start, end + timedelta(days=1)]

        expense_sql = """
            SELECT COALESCE(SUM(e.amount), 0) AS expense
            FROM expenses e
            WHERE e.expense_date BETWEEN %s AND %s
        """
        expense_params: list[object] = [start, end]

        if branch_id is not None:
            student_sql += " AND s.branch_id=%s"
            student_params.append(int(branch_id))
            expense_sql += " AND e.branch_id=%s"
            expense_params.append(int(branch_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(student_sql, tuple(student_params))
            students = fetchone(cur) or {}
            cur.execute(expense_sql, tuple(expense_params))
            expenses = fetchone(cur) or {}

        return MonthTotals(
            collection=to_decimal(students.get("collection")),
            due=to_decimal(students.get("due")),
            expense=to_decimal(expenses.get("expense")),
        )
