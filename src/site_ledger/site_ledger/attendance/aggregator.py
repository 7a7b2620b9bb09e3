"""Calendar and monthly views over canonical records.

Pure functions of (records, filters, displayed month); callers recompute on any
change instead of caching.
"""

from __future__ import annotations

import calendar
import re
import unicodedata
from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import end_of_month, iter_days, same_month, start_of_month
from ..common.numbers import round_half_up
from ..core.constants import ALL_SITES, HOURS_PER_MAN_DAY, UNASSIGNED_SITE_NAME, UNASSIGNED_SITE_SHORT
from ..core.enums import WORK_DAY_STATUSES, StatusBucket, StatusFilter, matches_filter, status_bucket
from .model import AttendanceRecord, CalendarDaySummary, MonthlyStats
from .range_planner import calendar_range

_BRACKETED = re.compile(r"\[[^\]]*\]|\([^)]*\)")
_SUFFIX_WORDS = re.compile(r"현장|사업장|사이트|지점|공사|프로젝트|\b(?:site|project|branch)\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def filter_records(
    records: Iterable[AttendanceRecord],
    *,
    site_id: Optional[str] = ALL_SITES,
    status_filter: StatusFilter = StatusFilter.ALL,
) -> list[AttendanceRecord]:
    out = list(records)
    if site_id and site_id != ALL_SITES:
        out = [r for r in out if r.site_id == site_id]
    if status_filter != StatusFilter.ALL:
        out = [r for r in out if matches_filter(r.status, status_filter)]
    return out


def shorten_site_label(name: Optional[str]) -> str:
    """Two-character calendar label for a site name."""
    cleaned = _BRACKETED.sub(" ", name or "")
    cleaned = _SUFFIX_WORDS.sub(" ", cleaned)
    compact = _WHITESPACE.sub("", cleaned)
    if not compact:
        return UNASSIGNED_SITE_SHORT
    return unicodedata.normalize("NFC", compact)[:2]


def site_label_source(record: AttendanceRecord, site_labels: Optional[Mapping[str, str]] = None) -> str:
    if site_labels and record.site_id and site_labels.get(record.site_id):
        return site_labels[record.site_id]
    if record.site_name and record.site_name != UNASSIGNED_SITE_NAME:
        return record.site_name
    return record.site_id or UNASSIGNED_SITE_NAME


def _man_days(hours: float) -> float:
    return hours / HOURS_PER_MAN_DAY


def summarize_day(
    day: date,
    records: Sequence[AttendanceRecord],
    *,
    view_month: date,
    site_labels: Optional[Mapping[str, str]] = None,
) -> CalendarDaySummary:
    """Summary for one grid day; `records` must already be filtered to that day."""
    total_hours = 0.0
    labor_by_bucket: dict[StatusBucket, float] = defaultdict(float)
    labels: list[str] = []

    for r in records:
        total_hours += r.work_hours or 0.0
        bucket = status_bucket(r.status)
        if bucket is not None:
            labor_by_bucket[bucket] += r.labor_hours or 0.0
        label = shorten_site_label(site_label_source(r, site_labels))
        if label not in labels:
            labels.append(label)

    return CalendarDaySummary(
        date=day,
        iso=day.isoformat(),
        is_current_month=same_month(day, view_month),
        is_sunday=day.weekday() == calendar.SUNDAY,
        total_hours=total_hours,
        total_man_days=_man_days(total_hours),
        approved_man_days=_man_days(labor_by_bucket[StatusBucket.APPROVED]),
        submitted_man_days=_man_days(labor_by_bucket[StatusBucket.SUBMITTED]),
        rejected_man_days=_man_days(labor_by_bucket[StatusBucket.REJECTED]),
        sites=tuple(labels),
        has_records=bool(records),
    )


def build_calendar(
    records: Iterable[AttendanceRecord],
    view_month: date,
    *,
    site_id: Optional[str] = ALL_SITES,
    status_filter: StatusFilter = StatusFilter.ALL,
    site_labels: Optional[Mapping[str, str]] = None,
    week_start: int = calendar.SUNDAY,
) -> list[CalendarDaySummary]:
    """Every day of the visible grid, including overflow days from adjacent months."""
    by_day: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in filter_records(records, site_id=site_id, status_filter=status_filter):
        if r.date is not None:
            by_day[r.date].append(r)

    grid = calendar_range(view_month, week_start=week_start)
    return [
        summarize_day(day, by_day.get(day, []), view_month=view_month, site_labels=site_labels)
        for day in iter_days(grid.start, grid.end)
    ]


def records_in_month(records: Iterable[AttendanceRecord], month: date) -> list[AttendanceRecord]:
    start, end = start_of_month(month), end_of_month(month)
    return [r for r in records if r.date is not None and start <= r.date <= end]


def monthly_stats(
    records: Iterable[AttendanceRecord],
    month: date,
    *,
    site_id: Optional[str] = ALL_SITES,
    status_filter: StatusFilter = StatusFilter.ALL,
) -> MonthlyStats:
    """Stats over the strict calendar month (not the padded grid)."""
    in_month = records_in_month(filter_records(records, site_id=site_id, status_filter=status_filter), month)

    work_days: set[date] = set()
    sites: set[str] = set()
    total_hours = 0.0
    for r in in_month:
        if r.status in WORK_DAY_STATUSES or r.work_hours > 0:
            work_days.add(r.date)
        if r.site_id:
            sites.add(r.site_id)
        total_hours += r.work_hours or 0.0

    return MonthlyStats(
        work_days=len(work_days),
        site_count=len(sites),
        total_man_days=round_half_up(_man_days(total_hours), 1),
    )
