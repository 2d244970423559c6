from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class MonthTotals:
    collection: Decimal
    due: Decimal
    expense: Decimal


@dataclass(frozen=True)
class DashboardStats:
    period_start: date
    period_end: date
    branch_id: Optional[int]
    total_collection: Decimal
    total_due: Decimal
    total_expense: Decimal

    @property
    def profit_loss(self) -> Decimal:
        return self.total_collection - self.total_expense
