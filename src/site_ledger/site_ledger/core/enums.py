from __future__ import annotations

from enum import Enum
from typing import Optional


class RecordStatus(str, Enum):
    """Normalized work-record status."""

    PRESENT = "present"
    IN_PROGRESS = "in-progress"
    ABSENT = "absent"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    # Legacy values still found in older rows.
    LATE = "late"
    COMPLETED = "completed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "RecordStatus":
        text = str(value or "").strip().lower().replace("_", "-")
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN


class StatusBucket(str, Enum):
    """Display bucket used by the calendar status breakdown."""

    APPROVED = "approved"
    SUBMITTED = "submitted"
    REJECTED = "rejected"


class StatusFilter(str, Enum):
    ALL = "all"
    APPROVED = "approved"
    SUBMITTED = "submitted"
    REJECTED = "rejected"


class EditorState(str, Enum):
    CLOSED = "closed"
    CONFIRM_CREATE = "confirm_create"
    EDITING = "editing"
    SUBMITTING = "submitting"


class SubmitStatus(str, Enum):
    SAVED = "saved"
    NOTHING_TO_CHANGE = "nothing_to_change"
    FAILED = "failed"


_BUCKETS = {
    RecordStatus.APPROVED: StatusBucket.APPROVED,
    RecordStatus.PRESENT: StatusBucket.APPROVED,
    RecordStatus.SUBMITTED: StatusBucket.SUBMITTED,
    RecordStatus.IN_PROGRESS: StatusBucket.SUBMITTED,
    RecordStatus.REJECTED: StatusBucket.REJECTED,
}

LOCKED_STATUSES = frozenset({RecordStatus.APPROVED})

WORK_DAY_STATUSES = frozenset(
    {
        RecordStatus.PRESENT,
        RecordStatus.LATE,
        RecordStatus.IN_PROGRESS,
        RecordStatus.SUBMITTED,
        RecordStatus.COMPLETED,
    }
)


def status_bucket(status: RecordStatus) -> Optional[StatusBucket]:
    return _BUCKETS.get(status)


def matches_filter(status: RecordStatus, status_filter: StatusFilter) -> bool:
    if status_filter == StatusFilter.ALL:
        return True
    bucket = status_bucket(status)
    return bucket is not None and bucket.value == status_filter.value
