from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import add_months, start_of_month, today_local
from ..core.constants import ALL_SITES
from ..core.enums import EditorState, StatusFilter
from ..core.exceptions import ValidationError
from .editor import BatchLedgerEditor
from .model import AttendanceRecord, CalendarDaySummary, DateRange, MonthlyStats
from .service import AttendanceService, FetchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one in-flight fetch and the inputs that triggered it."""

    generation: int
    identity: str
    view_month: date
    salary_month: date
    range: DateRange


class LedgerSession:
    """Record set owned by one UI session.

    The set is replaced wholesale on every completed fetch and never patched.
    Only the most recently issued fetch may install its result: changing the
    displayed month, the salary month, or closing the session cancels whatever
    is in flight.
    """

    def __init__(
        self,
        service: AttendanceService,
        *,
        identity: str,
        today: Optional[date] = None,
        view_month: Optional[date] = None,
        salary_month: Optional[date] = None,
        site_labels: Optional[Mapping[str, str]] = None,
    ):
        if not identity:
            raise ValidationError("identity is required")
        self._service = service
        self._identity = str(identity)
        self._today = today or today_local()
        self._view_month = start_of_month(view_month or self._today)
        self._salary_month = start_of_month(salary_month or self._today)
        self._site_labels = dict(site_labels or {})
        self._site_id: str = ALL_SITES
        self._status_filter = StatusFilter.ALL

        self._lock = threading.Lock()
        self._generations = itertools.count(1)
        self._pending: Optional[FetchTicket] = None
        self._closed = False
        self._records: tuple[AttendanceRecord, ...] = ()
        self._fetch_failed = False

        self.editor: BatchLedgerEditor = service.new_editor(self._identity, on_saved=self.refresh)

    # --- inputs -----------------------------------------------------------

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def view_month(self) -> date:
        return self._view_month

    @property
    def salary_month(self) -> date:
        return self._salary_month

    @property
    def site_id(self) -> str:
        return self._site_id

    @site_id.setter
    def site_id(self, value: Optional[str]) -> None:
        self._site_id = value or ALL_SITES

    @property
    def status_filter(self) -> StatusFilter:
        return self._status_filter

    @status_filter.setter
    def status_filter(self, value: StatusFilter | str) -> None:
        try:
            self._status_filter = StatusFilter(value)
        except ValueError:
            raise ValidationError(f"Unknown status filter: {value}")

    def set_view_month(self, month: date) -> None:
        with self._lock:
            self._view_month = start_of_month(month)
            self._cancel_locked()

    def next_month(self) -> date:
        self.set_view_month(add_months(self._view_month, 1))
        return self._view_month

    def previous_month(self) -> date:
        self.set_view_month(add_months(self._view_month, -1))
        return self._view_month

    def set_salary_month(self, month: date) -> None:
        with self._lock:
            self._salary_month = start_of_month(month)
            self._cancel_locked()

    # --- fetch lifecycle --------------------------------------------------

    @property
    def records(self) -> tuple[AttendanceRecord, ...]:
        return self._records

    @property
    def fetch_failed(self) -> bool:
        return self._fetch_failed

    @property
    def pending(self) -> Optional[FetchTicket]:
        return self._pending

    def begin_refresh(self) -> FetchTicket:
        with self._lock:
            if self._closed:
                raise ValidationError("Session is closed")
            ticket = FetchTicket(
                generation=next(self._generations),
                identity=self._identity,
                view_month=self._view_month,
                salary_month=self._salary_month,
                range=self._service.plan_range(self._view_month, self._salary_month, today=self._today),
            )
            self._pending = ticket
            return ticket

    def apply(self, ticket: FetchTicket, result: FetchResult) -> bool:
        """Install a fetch result unless a newer request or a cancel superseded it."""
        with self._lock:
            if self._pending is not ticket:
                logger.debug("Discarding stale fetch #%s for %s", ticket.generation, ticket.identity)
                return False
            self._pending = None
            self._records = tuple(result.records)
            self._fetch_failed = result.failed
            return True

    def _cancel_locked(self) -> None:
        if self._pending is not None:
            logger.debug("Cancelling fetch #%s for %s", self._pending.generation, self._identity)
        self._pending = None

    def cancel_pending(self) -> None:
        with self._lock:
            self._cancel_locked()

    def refresh(self) -> bool:
        """Fetch and install; a no-op once the session is closed."""
        with self._lock:
            if self._closed:
                logger.debug("Skipping refresh for closed session (%s)", self._identity)
                return False
        ticket = self.begin_refresh()
        result = self._service.fetch_records(ticket.identity, ticket.range)
        return self.apply(ticket, result)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_locked()
        if self.editor.state != EditorState.SUBMITTING:
            self.editor.close()

    # --- derived views ----------------------------------------------------

    def calendar_days(self) -> list[CalendarDaySummary]:
        return self._service.build_calendar(
            self._records,
            self._view_month,
            site_id=self._site_id,
            status_filter=self._status_filter,
            site_labels=self._site_labels,
        )

    def monthly_stats(self) -> MonthlyStats:
        return self._service.monthly_stats(
            self._records,
            self._view_month,
            site_id=self._site_id,
            status_filter=self._status_filter,
        )

    def open_day(self, day: date) -> EditorState:
        return self.editor.open_day(day, self._records)
