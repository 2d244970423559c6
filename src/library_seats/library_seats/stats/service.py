from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import month_bounds, today_local
from .model import DashboardStats
from .repository import StatsRepository

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, stats: StatsRepository, *, clock: Callable[[], date] = today_local):
        self._stats = stats
        self._clock = clock

    def dashboard(self, *, branch_id: Optional[int] = None) -> DashboardStats:
        """Totals for the current calendar month, optionally for one branch."""
        start, end = month_bounds(self._clock())
        totals = self._stats.totals(start=start, end=end, branch_id=branch_id)
        logger.debug("Dashboard totals %s..%s branch=%s: %s", start, end, branch_id, totals)
        return DashboardStats(
            period_start=start,
            period_end=end,
            branch_id=branch_id,
            total_collection=totals.collection,
            total_due=totals.due,
            total_expense=totals.expense,
        )
