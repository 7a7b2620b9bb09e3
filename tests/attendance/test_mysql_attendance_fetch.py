from __future__ import annotations

from datetime import date

from src.site_ledger.site_ledger.attendance.model import DateRange
from src.site_ledger.site_ledger.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.site_ledger.site_ledger.attendance.service import AttendanceService

ROWS = [
    {"id": 1, "user_id": "me", "site_id": "A", "work_date": date(2023, 5, 2), "man_days": 1, "status": "approved"},
    {"id": 2, "user_id": "me", "site_id": "A", "work_date": date(2024, 3, 4), "man_days": 1, "status": "submitted"},
    {"id": 3, "user_id": "me", "site_id": "A", "work_date": date(2024, 3, 5), "man_days": 1, "status": "submitted"},
]


class FakeCursor:
    """Applies the ORDER BY direction and LIMIT of the executed query to ROWS."""

    def __init__(self, executed):
        self._executed = executed
        self._rows = []

    def execute(self, sql, params=()):
        self._executed.append((sql, params))
        newest_first = "work_date DESC" in sql
        rows = sorted(ROWS, key=lambda r: (r["work_date"], r["id"]), reverse=newest_first)
        self._rows = rows[: params[-1]]

    def fetchall(self):
        return [dict(r) for r in self._rows]

    def close(self):
        pass


class FakeConnection:
    def __init__(self, executed):
        self._executed = executed
        self.committed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self._executed)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self):
        self.executed = []

    def connect(self, *, with_database=True):
        return FakeConnection(self.executed)


def test_fetch_limit_drops_oldest_rows_first():
    factory = FakeConnectionFactory()
    service = AttendanceService(MySQLAttendanceRepository(factory), fetch_limit=2)

    result = service.fetch_records("me", DateRange(start=date(2023, 4, 1), end=date(2024, 4, 6)))

    assert [r.date for r in result.records] == [date(2024, 3, 4), date(2024, 3, 5)]
    sql, params = factory.executed[-1]
    assert "LIMIT %s" in sql
    assert params == ("me", "me", date(2023, 4, 1), date(2024, 4, 6), 2)
