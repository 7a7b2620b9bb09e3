from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..common.numbers import finite_number
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WorkLogCandidate, WorkLogReport
from .repository import WorkLogRepository


def _report(r: dict) -> WorkLogReport:
    return WorkLogReport(
        id=str(r["report_id"]),
        work_date=coerce_date(r["work_date"]),
        site_id=str(r["site_id"]) if r.get("site_id") is not None else None,
        status=r.get("status"),
    )


class MySQLWorkLogRepository(WorkLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_assigned_reports(self, identity: str, start_date: date, end_date: date) -> Sequence[WorkLogCandidate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT dr.id AS report_id, dr.work_date, dr.site_id, dr.status,
                       wa.hours, wa.labor_hours
                FROM worker_assignments wa
                JOIN daily_reports dr ON dr.id = wa.daily_report_id
                WHERE wa.profile_id=%s AND dr.work_date BETWEEN %s AND %s
                ORDER BY dr.work_date ASC
                """,
                (identity, start_date, end_date),
            )
            return [
                WorkLogCandidate(
                    report=_report(r),
                    hours=finite_number(r.get("hours")),
                    labor_hours=finite_number(r.get("labor_hours")),
                )
                for r in fetchall(cur)
            ]

    def list_authored_reports(self, identity: str, start_date: date, end_date: date) -> Sequence[WorkLogReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id AS report_id, work_date, site_id, status
                FROM daily_reports
                WHERE created_by=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (identity, start_date, end_date),
            )
            return [_report(r) for r in fetchall(cur)]

    def find_work_record(self, report: WorkLogReport, identity: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id FROM work_records
                WHERE user_id=%s
                  AND (daily_report_id=%s OR (site_id <=> %s AND work_date=%s))
                LIMIT 1
                """,
                (identity, report.id, report.site_id, report.work_date),
            )
            row = fetchone(cur)
            return str(row["id"]) if row else None

    def insert_recovered_record(
        self,
        *,
        identity: str,
        report: WorkLogReport,
        work_hours: float,
        man_days: float,
        status: str,
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_records(
                    user_id, profile_id, daily_report_id, site_id, work_date,
                    work_hours, labor_hours, man_days, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    identity,
                    identity,
                    report.id,
                    report.site_id,
                    report.work_date,
                    work_hours,
                    man_days,
                    man_days,
                    status,
                ),
            )
            return str(cur.lastrowid)
