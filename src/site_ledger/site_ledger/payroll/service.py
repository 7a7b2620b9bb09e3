from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..attendance.aggregator import monthly_stats
from ..attendance.model import AttendanceRecord, MonthlyStats
from ..common.datetime_utils import add_months, end_of_month, format_year_month, start_of_month
from ..core.constants import (
    DEFAULT_SALARY_LOOKBACK_MONTHS,
    SALARY_HISTORY_SHORT_MONTHS,
    YEAR_MONTH_OPTION_COUNT,
    YEAR_MONTH_OPTIONS_BEFORE,
)


@dataclass(frozen=True)
class YearMonthOption:
    value: str
    label: str


@dataclass(frozen=True)
class SalaryMonthSummary:
    year_month: str
    label: str
    paid_date: date
    stats: MonthlyStats


def year_month_label(month: date) -> str:
    return f"{month.year}년 {month.month:02d}월"


class PayrollReportService:
    """Monthly labor summaries for the salary tab.

    Served from the same record set the calendar uses; the fetch window already
    covers the lookback.
    """

    def __init__(self, *, lookback_months: int = DEFAULT_SALARY_LOOKBACK_MONTHS):
        self._lookback_months = int(lookback_months)

    def build_salary_history(
        self,
        records: Iterable[AttendanceRecord],
        salary_month: date,
        *,
        show_all: bool = False,
    ) -> list[SalaryMonthSummary]:
        months = self._lookback_months if show_all else min(SALARY_HISTORY_SHORT_MONTHS, self._lookback_months)
        records = tuple(records)
        base = start_of_month(salary_month)

        history = []
        for offset in range(months):
            month = add_months(base, -offset)
            history.append(
                SalaryMonthSummary(
                    year_month=format_year_month(month),
                    label=year_month_label(month),
                    paid_date=end_of_month(month),
                    stats=monthly_stats(records, month),
                )
            )
        return history

    @staticmethod
    def year_month_options(view_month: date) -> list[YearMonthOption]:
        first = add_months(start_of_month(view_month), -YEAR_MONTH_OPTIONS_BEFORE)
        options = []
        for idx in range(YEAR_MONTH_OPTION_COUNT):
            month = add_months(first, idx)
            options.append(YearMonthOption(value=format_year_month(month), label=year_month_label(month)))
        return options
