from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Protocol, Sequence

from .model import LaborEntry, UpsertResult


class AttendanceRepository(Protocol):
    def fetch_attendance(
        self,
        identity: str,
        start_date: date,
        end_date: date,
        *,
        limit: int = 1000,
    ) -> Sequence[Mapping[str, Any]]:
        """Raw work-record rows for the identity within [start_date, end_date]."""

        raise NotImplementedError

    def upsert_labor(self, identity: str, entries: Sequence[LaborEntry]) -> UpsertResult:
        """Apply the whole batch or nothing; resubmission overwrites."""

        raise NotImplementedError
