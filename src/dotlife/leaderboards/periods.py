"""Date ranges for leaderboard periods.

Weeks are ISO weeks (Monday to Sunday, UTC).
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from enum import Enum


class Period(str, Enum):
    OVERALL = "overall"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def get_monday(d: date) -> date:
    """Get the Monday of the ISO week containing d."""
    return d - timedelta(days=d.weekday())


def period_range(period: Period, today: date) -> tuple[date, date]:
    """Inclusive (first, last) dates of the period containing ``today``.

    Raises:
        ValueError: For the overall period, which has no date range.
    """
    if period is Period.DAILY:
        return today, today
    if period is Period.WEEKLY:
        monday = get_monday(today)
        return monday, monday + timedelta(days=6)
    if period is Period.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if period is Period.YEARLY:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    msg = f"Period {period.value} has no date range"
    raise ValueError(msg)


def period_key(period: Period, today: date) -> str:
    """Stable label for a period instance, e.g. '2026-W09' or '2026-03'."""
    if period is Period.DAILY:
        return today.isoformat()
    if period is Period.WEEKLY:
        return today.strftime("%G-W%V")
    if period is Period.MONTHLY:
        return today.strftime("%Y-%m")
    if period is Period.YEARLY:
        return str(today.year)
    return "all"


def utc_today(now: datetime | None = None) -> date:
    if now is None:
        now = datetime.now(timezone.utc)
    return now.date()
