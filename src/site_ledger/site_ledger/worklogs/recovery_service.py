from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..attendance.model import DateRange
from ..common.datetime_utils import add_months, end_of_month, start_of_month
from ..core.constants import DEFAULT_RECOVERED_HOURS, DEFAULT_RECOVERY_WINDOW_MONTHS, HOURS_PER_MAN_DAY
from ..core.enums import RecordStatus
from ..core.exceptions import StoreError, ValidationError
from .model import RecoveryResult, WorkLogCandidate
from .repository import WorkLogRepository

logger = logging.getLogger(__name__)


def recovery_window(month: date, *, months: int = DEFAULT_RECOVERY_WINDOW_MONTHS) -> DateRange:
    return DateRange(
        start=start_of_month(add_months(month, -months)),
        end=end_of_month(add_months(month, months)),
    )


def candidate_hours(candidate: WorkLogCandidate) -> float:
    """Assigned hours, else labor man-days as hours, else a full day."""
    if candidate.hours and candidate.hours > 0:
        return float(candidate.hours)
    if candidate.labor_hours and candidate.labor_hours > 0:
        return float(candidate.labor_hours) * HOURS_PER_MAN_DAY
    return float(DEFAULT_RECOVERED_HOURS)


def merge_candidates(
    assigned: Iterable[WorkLogCandidate],
    authored: Iterable[WorkLogCandidate],
) -> list[WorkLogCandidate]:
    """Union by report id; the first occurrence wins."""
    seen: set[str] = set()
    out: list[WorkLogCandidate] = []
    for c in list(assigned) + list(authored):
        if c.report.id in seen:
            continue
        seen.add(c.report.id)
        out.append(c)
    return out


class ReconciliationService:
    """Backfills ledger rows for work logs that never produced one.

    Run on explicit request only. Check-then-insert per (report, identity), so
    repeated runs create nothing new.
    """

    def __init__(self, work_logs: WorkLogRepository, *, window_months: int = DEFAULT_RECOVERY_WINDOW_MONTHS):
        self._work_logs = work_logs
        self._window_months = int(window_months)

    def collect_candidates(self, identity: str, window: DateRange) -> list[WorkLogCandidate]:
        assigned = self._work_logs.list_assigned_reports(identity, window.start, window.end)
        authored = [
            WorkLogCandidate(report=r)
            for r in self._work_logs.list_authored_reports(identity, window.start, window.end)
        ]
        return merge_candidates(assigned, authored)

    def run(self, identity: str, *, around_month: date, window: Optional[DateRange] = None) -> RecoveryResult:
        if not identity:
            raise ValidationError("identity is required")

        window = window or recovery_window(around_month, months=self._window_months)
        candidates = self.collect_candidates(identity, window)

        created = skipped = failed = 0
        for candidate in candidates:
            report = candidate.report
            if report.work_date is None:
                skipped += 1
                continue

            hours = candidate_hours(candidate)
            try:
                if self._work_logs.find_work_record(report, identity) is not None:
                    skipped += 1
                    continue
                self._work_logs.insert_recovered_record(
                    identity=identity,
                    report=report,
                    work_hours=hours,
                    man_days=hours / HOURS_PER_MAN_DAY,
                    status=RecordStatus.SUBMITTED.value,
                )
            except StoreError:
                logger.exception("Could not recover work record for report %s (%s)", report.id, identity)
                failed += 1
                continue

            logger.info("Recovered work record for report %s on %s (%s)", report.id, report.work_date, identity)
            created += 1

        return RecoveryResult(created=created, skipped=skipped, failed=failed, candidates=len(candidates))
