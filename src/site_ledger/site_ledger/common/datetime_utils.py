from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_year_month(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def format_year_month(value: date) -> str:
    return value.strftime("%Y-%m")


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def coerce_date(value: object) -> Optional[date]:
    """Date-only part of a date, datetime or ISO-like string; None if unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip().replace("T", " ").split(" ")[0]
        if not text:
            return None
        try:
            return parse_iso_date(text)
        except ValueError:
            return None
    return None


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    return value.replace(day=calendar.monthrange(value.year, value.month)[1])


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def start_of_week(value: date, week_start: int = calendar.SUNDAY) -> date:
    offset = (value.weekday() - week_start) % 7
    return value - timedelta(days=offset)


def end_of_week(value: date, week_start: int = calendar.SUNDAY) -> date:
    return start_of_week(value, week_start) + timedelta(days=6)


def iter_days(start: date, end: date) -> Iterator[date]:
    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month
