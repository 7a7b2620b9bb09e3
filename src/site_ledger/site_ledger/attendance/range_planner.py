from __future__ import annotations

import calendar
from datetime import date

from ..common.datetime_utils import add_months, end_of_month, end_of_week, start_of_month, start_of_week
from ..core.constants import DEFAULT_SALARY_LOOKBACK_MONTHS
from .model import DateRange


def calendar_range(month: date, *, week_start: int = calendar.SUNDAY) -> DateRange:
    """Week-aligned span of the calendar grid for the month containing `month`."""
    return DateRange(
        start=start_of_week(start_of_month(month), week_start),
        end=end_of_week(end_of_month(month), week_start),
    )


def salary_range(
    salary_month: date,
    *,
    today: date,
    months: int = DEFAULT_SALARY_LOOKBACK_MONTHS,
) -> DateRange:
    """Month-aligned lookback window ending at the later of today or salary_month."""
    start = start_of_month(add_months(start_of_month(salary_month), -(max(months, 1) - 1)))
    end = end_of_month(max(today, start_of_month(salary_month)))
    return DateRange(start=start, end=end)


def plan_fetch_range(
    view_month: date,
    salary_month: date,
    *,
    today: date,
    months: int = DEFAULT_SALARY_LOOKBACK_MONTHS,
    week_start: int = calendar.SUNDAY,
) -> DateRange:
    """One bounded fetch that serves both the calendar grid and the salary views."""
    grid = calendar_range(view_month, week_start=week_start)
    lookback = salary_range(salary_month, today=today, months=months)
    return DateRange(start=min(grid.start, lookback.start), end=max(grid.end, lookback.end))
