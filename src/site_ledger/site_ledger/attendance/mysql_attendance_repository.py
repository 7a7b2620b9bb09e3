from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Sequence

from ..core.constants import DEFAULT_FETCH_LIMIT, HOURS_PER_MAN_DAY
from ..core.enums import LOCKED_STATUSES, RecordStatus
from ..core.exceptions import AuthorizationError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LaborEntry, UpsertResult
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_attendance(
        self,
        identity: str,
        start_date: date,
        end_date: date,
        *,
        limit: int = DEFAULT_FETCH_LIMIT,
    ) -> Sequence[dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    wr.id, wr.user_id, wr.profile_id, wr.site_id, wr.daily_report_id,
                    wr.work_date, wr.work_hours, wr.labor_hours, wr.man_days, wr.overtime_hours,
                    wr.status, wr.check_in_time, wr.check_out_time, wr.notes,
                    s.name AS site_name, s.address AS site_address,
                    p.full_name AS worker_name
                FROM work_records wr
                LEFT JOIN sites s ON s.id = wr.site_id
                LEFT JOIN profiles p ON p.id = COALESCE(wr.profile_id, wr.user_id)
                WHERE (wr.user_id=%s OR wr.profile_id=%s)
                  AND wr.work_date BETWEEN %s AND %s
                ORDER BY wr.work_date DESC, wr.id DESC
                LIMIT %s
                """,
                (identity, identity, start_date, end_date, int(limit)),
            )
            return fetchall(cur)

    def upsert_labor(self, identity: str, entries: Sequence[LaborEntry]) -> UpsertResult:
        if not entries:
            return UpsertResult(success=True, message="Nothing to change")

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                member_name = self._member_name(cur, identity)
                for entry in entries:
                    report_id = self._ensure_report(cur, identity, member_name, entry)
                    self._upsert_worker(cur, identity, report_id, entry)
                    self._upsert_work_record(cur, identity, report_id, entry)
        except (AuthorizationError, StoreError) as exc:
            return UpsertResult(success=False, error=str(exc))

        return UpsertResult(success=True, message=f"Saved {len(entries)} site(s)")

    @staticmethod
    def _member_name(cur, identity: str) -> str:
        cur.execute("SELECT full_name FROM profiles WHERE id=%s", (identity,))
        row = fetchone(cur)
        return str(row["full_name"]) if row and row.get("full_name") else str(identity)

    @staticmethod
    def _ensure_report(cur, identity: str, member_name: str, entry: LaborEntry) -> str:
        cur.execute(
            """
            SELECT id, status FROM daily_reports
            WHERE site_id=%s AND work_date=%s
            ORDER BY created_at ASC
            LIMIT 1
            FOR UPDATE
            """,
            (entry.site_id, entry.work_date),
        )
        report = fetchone(cur)
        if report:
            if RecordStatus.parse(report.get("status")) in LOCKED_STATUSES:
                raise AuthorizationError(f"[{entry.site_id}] work log for {entry.work_date} is already approved")
            return str(report["id"])

        report_id = str(uuid.uuid4())
        cur.execute(
            """
            INSERT INTO daily_reports(id, site_id, work_date, status, member_name, created_by)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (report_id, entry.site_id, entry.work_date, RecordStatus.SUBMITTED.value, member_name, identity),
        )
        return report_id

    @staticmethod
    def _upsert_worker(cur, identity: str, report_id: str, entry: LaborEntry) -> None:
        man_days = entry.hours / HOURS_PER_MAN_DAY
        cur.execute(
            "SELECT id FROM worker_assignments WHERE daily_report_id=%s AND profile_id=%s FOR UPDATE",
            (report_id, identity),
        )
        existing = fetchone(cur)
        if existing:
            cur.execute(
                "UPDATE worker_assignments SET hours=%s, labor_hours=%s WHERE id=%s",
                (entry.hours, man_days, existing["id"]),
            )
        else:
            cur.execute(
                """
                INSERT INTO worker_assignments(daily_report_id, profile_id, hours, labor_hours)
                VALUES(%s,%s,%s,%s)
                """,
                (report_id, identity, entry.hours, man_days),
            )

    @staticmethod
    def _upsert_work_record(cur, identity: str, report_id: str, entry: LaborEntry) -> None:
        cur.execute(
            """
            SELECT id, status FROM work_records
            WHERE user_id=%s AND site_id=%s AND work_date=%s
            FOR UPDATE
            """,
            (identity, entry.site_id, entry.work_date),
        )
        existing = fetchone(cur)
        if existing and RecordStatus.parse(existing.get("status")) in LOCKED_STATUSES:
            raise AuthorizationError(f"[{entry.site_id}] record for {entry.work_date} is already approved")

        man_days = entry.hours / HOURS_PER_MAN_DAY
        cur.execute(
            """
            INSERT INTO work_records(
                user_id, profile_id, site_id, daily_report_id, work_date,
                work_hours, labor_hours, man_days, status
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                work_hours=VALUES(work_hours),
                labor_hours=VALUES(labor_hours),
                man_days=VALUES(man_days),
                status=VALUES(status),
                daily_report_id=VALUES(daily_report_id)
            """,
            (
                identity,
                identity,
                entry.site_id,
                report_id,
                entry.work_date,
                entry.hours,
                man_days,
                man_days,
                RecordStatus.SUBMITTED.value,
            ),
        )
