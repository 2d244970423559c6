from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.library_seats.library_seats.stats.model import MonthTotals
from src.library_seats.library_seats.stats.service import StatsService

from tests.fakes import FakeStats


def test_dashboard_uses_current_month_and_profit():
    repo = FakeStats(MonthTotals(collection=Decimal("1000"), due=Decimal("250"), expense=Decimal("1300")))
    svc = StatsService(repo, clock=lambda: date(2026, 2, 14))

    stats = svc.dashboard(branch_id=1)

    assert repo.calls == [{"start": date(2026, 2, 1), "end": date(2026, 2, 28), "branch_id": 1}]
    assert stats.total_due == Decimal("250")
    assert stats.profit_loss == Decimal("-300")


def test_dashboard_all_branches():
    repo = FakeStats()

    stats = StatsService(repo, clock=lambda: date(2026, 12, 31)).dashboard()

    assert repo.calls[0]["branch_id"] is None
    assert (stats.period_start, stats.period_end) == (date(2026, 12, 1), date(2026, 12, 31))
    assert stats.profit_loss == 0
