"""Raw work-record rows -> canonical AttendanceRecord.

Upstream rows come in several shapes (legacy labor_hours, man_days, plain
work_hours, nested site objects). Everything here is pure and never raises:
a malformed numeric field degrades to 0 and an unreadable date to None.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import coerce_date
from ..common.numbers import finite_number, round_half_up
from ..core.constants import HOURS_PER_MAN_DAY, LEGACY_MAN_DAY_THRESHOLD, UNASSIGNED_SITE_NAME
from ..core.enums import RecordStatus
from .model import AttendanceRecord

Row = Mapping[str, Any]


def resolve_legacy_labor_hours(value: float) -> float:
    """Read the untagged legacy labor_hours field as hours.

    Small values were stored as man-days, larger ones as raw hours.
    TODO: revisit LEGACY_MAN_DAY_THRESHOLD once legacy rows are migrated to man_days.
    """
    if value <= LEGACY_MAN_DAY_THRESHOLD:
        return value * HOURS_PER_MAN_DAY
    return value


def resolve_labor_hours(row: Row) -> float:
    man_days = finite_number(row.get("man_days"))
    if man_days is not None:
        return man_days * HOURS_PER_MAN_DAY

    legacy = finite_number(row.get("labor_hours"))
    if legacy is not None:
        return resolve_legacy_labor_hours(legacy)

    work_hours = finite_number(row.get("work_hours"))
    if work_hours is not None:
        return work_hours
    return 0.0


def resolve_work_hours(row: Row) -> float:
    work_hours = finite_number(row.get("work_hours"))
    if work_hours is not None:
        return work_hours
    return resolve_labor_hours(row)


def truncate_work_date(value: object) -> Optional[date]:
    return coerce_date(value)


def infer_status(row: Row) -> RecordStatus:
    explicit = row.get("status")
    if explicit:
        return RecordStatus.parse(explicit)
    if row.get("check_in_time"):
        return RecordStatus.PRESENT if row.get("check_out_time") else RecordStatus.IN_PROGRESS
    return RecordStatus.ABSENT


def _same_identity(value: object, identity: str) -> bool:
    return value is not None and str(value) == identity


def is_own_row(row: Row, identity: Optional[object]) -> bool:
    if identity is None or identity == "":
        return False
    ident = str(identity)
    return _same_identity(row.get("user_id"), ident) or _same_identity(row.get("profile_id"), ident)


def _nested(row: Row, key: str, attr: str) -> Optional[str]:
    nested = row.get(key)
    if isinstance(nested, (list, tuple)):
        nested = nested[0] if nested else None
    if isinstance(nested, Mapping):
        value = nested.get(attr)
        if value:
            return str(value)
    return None


def _text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _hours(value: float) -> float:
    return round_half_up(value, 2)


def normalize_row(row: Row, identity: Optional[object]) -> AttendanceRecord:
    overtime = finite_number(row.get("overtime_hours"))
    site_id = row.get("site_id")

    return AttendanceRecord(
        id=_text(row.get("id")),
        date=truncate_work_date(row.get("work_date")),
        work_hours=_hours(resolve_work_hours(row)),
        labor_hours=_hours(resolve_labor_hours(row)),
        overtime_hours=_hours(overtime) if overtime is not None else 0.0,
        status=infer_status(row),
        site_id=str(site_id) if site_id is not None and site_id != "" else None,
        site_name=_text(row.get("site_name")) or _nested(row, "sites", "name") or UNASSIGNED_SITE_NAME,
        site_address=_text(row.get("site_address")) or _nested(row, "sites", "address"),
        worker_name=_text(row.get("worker_name")) or _nested(row, "profiles", "full_name"),
        notes=_text(row.get("notes")) or _text(row.get("additional_notes")),
        is_me=is_own_row(row, identity),
    )


def normalize_rows(rows: Iterable[Row], identity: Optional[object]) -> tuple[AttendanceRecord, ...]:
    records = [normalize_row(r, identity) for r in rows if isinstance(r, Mapping)]
    records.sort(key=lambda r: r.date or date.min)
    return tuple(records)
