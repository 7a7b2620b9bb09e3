from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import WorkLogCandidate, WorkLogReport


class WorkLogRepository(Protocol):
    def list_assigned_reports(self, identity: str, start_date: date, end_date: date) -> Sequence[WorkLogCandidate]:
        """Reports the identity is assigned to as a worker, with assigned hours."""

        raise NotImplementedError

    def list_authored_reports(self, identity: str, start_date: date, end_date: date) -> Sequence[WorkLogReport]:
        raise NotImplementedError

    def find_work_record(self, report: WorkLogReport, identity: str) -> Optional[str]:
        """Id of the ledger row for (report, identity), or None.

        A row for the same site and date under another report also counts,
        since ledger rows are unique per (identity, site, date).
        """

        raise NotImplementedError

    def insert_recovered_record(
        self,
        *,
        identity: str,
        report: WorkLogReport,
        work_hours: float,
        man_days: float,
        status: str,
    ) -> str:
        raise NotImplementedError
