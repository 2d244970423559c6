from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import MonthTotals


class StatsRepository(Protocol):
    def totals(self, *, start: date, end: date, branch_id: Optional[int] = None) -> MonthTotals:
        """Money collected/due from students enrolled in [start, end] and expenses dated in it."""

        raise NotImplementedError
