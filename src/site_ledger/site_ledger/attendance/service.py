from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Mapping, Optional

from ..common.datetime_utils import today_local
from ..core.constants import ALL_SITES, DEFAULT_FETCH_LIMIT, DEFAULT_SALARY_LOOKBACK_MONTHS
from ..core.enums import StatusFilter
from . import aggregator
from .editor import BatchLedgerEditor
from .model import AttendanceRecord, CalendarDaySummary, DateRange, MonthlyStats
from .normalizer import normalize_rows
from .range_planner import plan_fetch_range
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    records: tuple[AttendanceRecord, ...]
    range: DateRange
    failed: bool = False


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        salary_months: int = DEFAULT_SALARY_LOOKBACK_MONTHS,
        fetch_limit: int = DEFAULT_FETCH_LIMIT,
        week_start: int = calendar.SUNDAY,
    ):
        self._attendance = attendance
        self._salary_months = int(salary_months)
        self._fetch_limit = int(fetch_limit)
        self._week_start = int(week_start)

    @property
    def week_start(self) -> int:
        return self._week_start

    def plan_range(self, view_month: date, salary_month: date, *, today: Optional[date] = None) -> DateRange:
        return plan_fetch_range(
            view_month,
            salary_month,
            today=today or today_local(),
            months=self._salary_months,
            week_start=self._week_start,
        )

    def fetch_records(self, identity: str, date_range: DateRange) -> FetchResult:
        """Fetch and normalize; any store failure degrades to an empty, retryable set."""
        try:
            rows = self._attendance.fetch_attendance(
                identity, date_range.start, date_range.end, limit=self._fetch_limit
            )
        except Exception:
            logger.exception(
                "Work record fetch failed for %s (%s..%s)", identity, date_range.start, date_range.end
            )
            return FetchResult(records=(), range=date_range, failed=True)

        return FetchResult(records=normalize_rows(rows or [], identity), range=date_range)

    def load(
        self,
        identity: str,
        *,
        view_month: date,
        salary_month: date,
        today: Optional[date] = None,
    ) -> FetchResult:
        return self.fetch_records(identity, self.plan_range(view_month, salary_month, today=today))

    def build_calendar(
        self,
        records: Iterable[AttendanceRecord],
        view_month: date,
        *,
        site_id: Optional[str] = ALL_SITES,
        status_filter: StatusFilter = StatusFilter.ALL,
        site_labels: Optional[Mapping[str, str]] = None,
    ) -> list[CalendarDaySummary]:
        return aggregator.build_calendar(
            records,
            view_month,
            site_id=site_id,
            status_filter=status_filter,
            site_labels=site_labels,
            week_start=self._week_start,
        )

    def monthly_stats(
        self,
        records: Iterable[AttendanceRecord],
        month: date,
        *,
        site_id: Optional[str] = ALL_SITES,
        status_filter: StatusFilter = StatusFilter.ALL,
    ) -> MonthlyStats:
        return aggregator.monthly_stats(records, month, site_id=site_id, status_filter=status_filter)

    def new_editor(self, identity: str, *, on_saved: Optional[Callable[[], object]] = None) -> BatchLedgerEditor:
        return BatchLedgerEditor(self._attendance, identity=identity, on_saved=on_saved)
