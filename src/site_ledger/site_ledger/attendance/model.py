from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.constants import UNASSIGNED_SITE_NAME
from ..core.enums import RecordStatus, SubmitStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Canonical work record, independent of the upstream row shape."""

    id: Optional[str]
    date: Optional[date]
    work_hours: float
    labor_hours: float
    status: RecordStatus
    is_me: bool
    overtime_hours: float = 0.0
    site_id: Optional[str] = None
    site_name: str = UNASSIGNED_SITE_NAME
    site_address: Optional[str] = None
    worker_name: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class CalendarDaySummary:
    """Derived per-day view; recomputed, never persisted."""

    date: date
    iso: str
    is_current_month: bool
    is_sunday: bool
    total_hours: float
    total_man_days: float
    approved_man_days: float
    submitted_man_days: float
    rejected_man_days: float
    sites: tuple[str, ...]
    has_records: bool


@dataclass(frozen=True)
class MonthlyStats:
    work_days: int
    site_count: int
    total_man_days: float


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class LaborEntry:
    """One row of a batch labor upsert, keyed by (identity, site_id, work_date)."""

    site_id: str
    work_date: date
    hours: float


@dataclass(frozen=True)
class UpsertResult:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CreateWorkLogTarget:
    """Where the caller should send the user to create a work log."""

    work_date: date
    site_id: Optional[str] = None


@dataclass(frozen=True)
class SubmitOutcome:
    status: SubmitStatus
    message: str
    entries: tuple[LaborEntry, ...] = field(default_factory=tuple)
