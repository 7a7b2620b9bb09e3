from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_FETCH_LIMIT, DEFAULT_RECOVERY_WINDOW_MONTHS, DEFAULT_SALARY_LOOKBACK_MONTHS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import PayrollReportService
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.service import SiteDirectoryService
from .worklogs.mysql_worklog_repository import MySQLWorkLogRepository
from .worklogs.recovery_service import ReconciliationService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    sites_repo: MySQLSiteRepository
    worklogs_repo: MySQLWorkLogRepository

    attendance_service: AttendanceService
    site_service: SiteDirectoryService
    payroll_report_service: PayrollReportService
    reconciliation_service: ReconciliationService


def build_container(*, db_config: Mapping[str, Any], ledger_config: Optional[Mapping[str, Any]] = None) -> Container:
    ledger_config = ledger_config or {}
    salary_months = int(ledger_config.get("SALARY_LOOKBACK_MONTHS", DEFAULT_SALARY_LOOKBACK_MONTHS))

    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    sites_repo = MySQLSiteRepository(conn)
    worklogs_repo = MySQLWorkLogRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        salary_months=salary_months,
        fetch_limit=int(ledger_config.get("FETCH_LIMIT", DEFAULT_FETCH_LIMIT)),
        week_start=int(ledger_config.get("WEEK_START", calendar.SUNDAY)),
    )
    site_service = SiteDirectoryService(sites_repo)
    payroll_report_service = PayrollReportService(lookback_months=salary_months)
    reconciliation_service = ReconciliationService(
        worklogs_repo,
        window_months=int(ledger_config.get("RECOVERY_WINDOW_MONTHS", DEFAULT_RECOVERY_WINDOW_MONTHS)),
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        sites_repo=sites_repo,
        worklogs_repo=worklogs_repo,
        attendance_service=attendance_service,
        site_service=site_service,
        payroll_report_service=payroll_report_service,
        reconciliation_service=reconciliation_service,
    )
