from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Shift:
    """Domain entity: a shift (stored in the ``schedules`` table)."""

    shift_id: int
    title: str
    time: Optional[str] = None
    event_date: Optional[date] = None
    description: Optional[str] = None
