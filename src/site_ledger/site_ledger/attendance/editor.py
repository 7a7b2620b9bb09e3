from __future__ import annotations

import logging
import math
from datetime import date
from typing import Callable, Iterable, Mapping, Optional

from ..common.numbers import finite_number, round_half_up
from ..core.constants import HOURS_PER_MAN_DAY, LABOR_MAX, LABOR_MIN, LABOR_STEP
from ..core.enums import LOCKED_STATUSES, EditorState, RecordStatus, SubmitStatus
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from .model import AttendanceRecord, CreateWorkLogTarget, LaborEntry, SubmitOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def clamp_labor_value(value: float) -> float:
    """Snap to the 0.5 grid and clamp into [LABOR_MIN, LABOR_MAX]."""
    snapped = math.floor(value / LABOR_STEP + 0.5) * LABOR_STEP
    return min(max(snapped, LABOR_MIN), LABOR_MAX)


def format_labor_value(value: float) -> str:
    return f"{round_half_up(value, 1):.1f}"


def seed_labor_value(record: AttendanceRecord) -> str:
    return format_labor_value((record.labor_hours or 0.0) / HOURS_PER_MAN_DAY)


class BatchLedgerEditor:
    """Per-day, per-site labor edit set for the requesting identity.

    States: closed -> (editing | confirm_create); editing -> submitting ->
    (closed on success | editing on failure); editing -> closed on cancel.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        identity: str,
        on_saved: Optional[Callable[[], object]] = None,
    ):
        self._attendance = attendance
        self._identity = identity
        self._on_saved = on_saved
        self._state = EditorState.CLOSED
        self._day: Optional[date] = None
        self._edits: dict[str, str] = {}
        self._seeds: dict[str, str] = {}
        self._day_records: tuple[AttendanceRecord, ...] = ()
        self._locked_sites: frozenset[str] = frozenset()

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def day(self) -> Optional[date]:
        return self._day

    @property
    def edits(self) -> Mapping[str, str]:
        return dict(self._edits)

    @property
    def my_records(self) -> tuple[AttendanceRecord, ...]:
        return tuple(r for r in self._day_records if r.is_me)

    def open_day(self, day: date, records: Iterable[AttendanceRecord]) -> EditorState:
        if self._state == EditorState.SUBMITTING:
            raise ValidationError("A submission is already in progress")

        day_records = tuple(r for r in records if r.date == day and r.status != RecordStatus.ABSENT)
        self._day = day
        self._edits = {}
        self._seeds = {}

        if not day_records:
            self._day_records = ()
            self._locked_sites = frozenset()
            self._state = EditorState.CONFIRM_CREATE
            return self._state

        mine = [r for r in day_records if r.is_me]
        self._day_records = day_records
        self._locked_sites = frozenset(r.site_id for r in mine if r.site_id and r.status in LOCKED_STATUSES)
        for r in mine:
            if r.site_id and r.site_id not in self._locked_sites:
                self._seeds[r.site_id] = self._edits[r.site_id] = seed_labor_value(r)

        self._state = EditorState.EDITING
        return self._state

    def confirm_create(self, site_id: Optional[str] = None) -> CreateWorkLogTarget:
        if self._state != EditorState.CONFIRM_CREATE or self._day is None:
            raise ValidationError("No empty date is awaiting confirmation")
        target = CreateWorkLogTarget(work_date=self._day, site_id=site_id)
        self.close()
        return target

    def _require_editing(self) -> None:
        if self._state != EditorState.EDITING:
            raise ValidationError("Open a day with records before editing labor")

    def _require_editable_site(self, site_id: str) -> None:
        if not site_id:
            raise ValidationError("site_id is required")
        if site_id in self._locked_sites:
            raise AuthorizationError("Approved records can no longer be changed")

    def set_labor(self, site_id: str, value: object) -> str:
        self._require_editing()
        self._require_editable_site(site_id)
        number = finite_number(value)
        if number is None:
            raise ValidationError("Labor must be a number of man-days")
        formatted = format_labor_value(clamp_labor_value(number))
        self._edits[site_id] = formatted
        return formatted

    def step_labor(self, site_id: str, steps: int = 1) -> str:
        self._require_editing()
        current = finite_number(self._edits.get(site_id)) or 0.0
        return self.set_labor(site_id, current + steps * LABOR_STEP)

    def remove_site(self, site_id: str) -> None:
        self._require_editing()
        self._edits.pop(site_id, None)

    def close(self) -> None:
        if self._state == EditorState.SUBMITTING:
            raise ValidationError("A submission is in progress")
        self._reset()

    cancel = close

    def _reset(self) -> None:
        self._state = EditorState.CLOSED
        self._day = None
        self._edits = {}
        self._seeds = {}
        self._day_records = ()
        self._locked_sites = frozenset()

    def changed_edits(self) -> dict[str, str]:
        """Edits that differ from the value the site was opened with."""
        return {site_id: text for site_id, text in self._edits.items() if self._seeds.get(site_id) != text}

    def build_entries(self) -> tuple[LaborEntry, ...]:
        if self._day is None:
            raise ValidationError("No day is open")
        entries = []
        for site_id, text in self.changed_edits().items():
            value = finite_number(text)
            if value is None:
                raise ValidationError(f"Invalid labor value for site {site_id}")
            entries.append(LaborEntry(site_id=site_id, work_date=self._day, hours=value * HOURS_PER_MAN_DAY))
        return tuple(entries)

    def submit(self) -> SubmitOutcome:
        self._require_editing()
        changed = self.changed_edits()
        if not changed:
            return SubmitOutcome(status=SubmitStatus.NOTHING_TO_CHANGE, message="Nothing to change")

        for site_id in changed:
            self._require_editable_site(site_id)
        entries = self.build_entries()

        self._state = EditorState.SUBMITTING
        try:
            result = self._attendance.upsert_labor(self._identity, entries)
        except StoreError as exc:
            logger.warning("Labor upsert failed for %s on %s: %s", self._identity, self._day, exc)
            self._state = EditorState.EDITING
            return SubmitOutcome(status=SubmitStatus.FAILED, message=str(exc) or "Save failed", entries=entries)
        except Exception:
            self._state = EditorState.EDITING
            raise

        if not result.success:
            logger.warning("Labor upsert rejected for %s on %s: %s", self._identity, self._day, result.error)
            self._state = EditorState.EDITING
            return SubmitOutcome(status=SubmitStatus.FAILED, message=result.error or "Save failed", entries=entries)

        self._reset()
        if self._on_saved is not None:
            self._on_saved()
        return SubmitOutcome(status=SubmitStatus.SAVED, message=result.message or "Saved", entries=entries)
