"""Calendar window helpers (inclusive date bounds)."""
from __future__ import annotations

from calendar import monthrange
from datetime import date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def quarter_bounds(year: int, month: int) -> tuple[date, date]:
    first_month = 3 * ((month - 1) // 3) + 1
    start, _ = month_bounds(year, first_month)
    _, end = month_bounds(year, first_month + 2)
    return start, end


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)
