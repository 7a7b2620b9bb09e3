from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class WorkLogReport:
    """Daily report header as stored by the work-log module."""

    id: str
    work_date: date
    site_id: Optional[str]
    status: Optional[str] = None


@dataclass(frozen=True)
class WorkLogCandidate:
    """A report the identity worked on, with whatever labor it recorded."""

    report: WorkLogReport
    hours: Optional[float] = None
    labor_hours: Optional[float] = None


@dataclass(frozen=True)
class RecoveryResult:
    created: int
    skipped: int
    failed: int
    candidates: int

    @property
    def message(self) -> str:
        if self.failed > 0:
            return f"{self.created} record(s) recovered, {self.failed} failed"
        if self.created > 0:
            return f"{self.created} record(s) recovered"
        if self.candidates == 0:
            return "Nothing to sync"
        return "Already up to date"

