from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from flask import Flask

from src.site_ledger.site_ledger.attendance import controller as attendance_controller
from src.site_ledger.site_ledger.attendance.model import UpsertResult
from src.site_ledger.site_ledger.attendance.service import AttendanceService
from src.site_ledger.site_ledger.core.exceptions import StoreError
from src.site_ledger.site_ledger.payroll.service import PayrollReportService
from src.site_ledger.site_ledger.sites.model import Site
from src.site_ledger.site_ledger.sites.service import SiteDirectoryService
from src.site_ledger.site_ledger.worklogs.model import RecoveryResult

TODAY = date(2024, 3, 20)


class FakeAttendance:
    def __init__(self, rows):
        self.rows = rows
        self.upserts = []

    def fetch_attendance(self, identity, start_date, end_date, *, limit=1000):
        return [r for r in self.rows if start_date <= date.fromisoformat(r["work_date"]) <= end_date]

    def upsert_labor(self, identity, entries):
        self.upserts.append((identity, tuple(entries)))
        return UpsertResult(success=True, message="Saved")


class FakeSites:
    def list_sites(self):
        return [Site(id="A", name="강남 현장")]

    def list_assignments(self, identity):
        return []


class FakeReconciliation:
    def __init__(self, error=None):
        self.error = error

    def run(self, identity, *, around_month):
        if self.error:
            raise self.error
        return RecoveryResult(created=1, skipped=0, failed=0, candidates=1)


@pytest.fixture()
def attendance_repo():
    return FakeAttendance(
        [
            {"user_id": "7", "site_id": "A", "work_date": "2024-03-05", "man_days": 1, "status": "submitted"},
            {"user_id": "7", "site_id": "B", "work_date": "2024-03-06", "man_days": 1, "status": "approved"},
        ]
    )


@pytest.fixture()
def make_client(attendance_repo, monkeypatch):
    monkeypatch.setattr(attendance_controller, "today_local", lambda: TODAY)

    def _make(reconciliation=None, login=True):
        app = Flask(__name__)
        app.secret_key = "test"
        container = SimpleNamespace(
            attendance_service=AttendanceService(attendance_repo),
            site_service=SiteDirectoryService(FakeSites()),
            payroll_report_service=PayrollReportService(),
            reconciliation_service=reconciliation or FakeReconciliation(),
        )
        attendance_controller.register(app, container)
        client = app.test_client()
        if login:
            with client.session_transaction() as sess:
                sess["user_id"] = 7
        return client

    return _make


def test_requires_login(make_client):
    resp = make_client(login=False).get("/api/attendance/calendar")
    assert resp.status_code == 401


def test_calendar_returns_days_and_stats(make_client):
    resp = make_client().get("/api/attendance/calendar?month=2024-03")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["month"] == "2024-03"
    assert len(body["days"]) == 42
    assert body["stats"]["total_man_days"] == 2.0
    assert body["retryable"] is False
    day = next(d for d in body["days"] if d["iso"] == "2024-03-05")
    assert day["sites"] == ["강남"]


def test_calendar_rejects_bad_month(make_client):
    resp = make_client().get("/api/attendance/calendar?month=March")
    assert resp.status_code == 400


def test_calendar_status_filter(make_client):
    body = make_client().get("/api/attendance/calendar?month=2024-03&status=approved").get_json()
    assert body["stats"]["total_man_days"] == 1.0


def test_empty_day_asks_to_create_work_log(make_client):
    body = make_client().get("/api/attendance/day/2024-03-09").get_json()
    assert body["state"] == "confirm_create"
    assert body["create"]["work_date"] == "2024-03-09"


def test_save_labor_posts_hours(make_client, attendance_repo):
    resp = make_client().post("/api/attendance/day/2024-03-05/labor", json={"edits": {"A": "1.5"}})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["status"] == "saved"
    assert body["entries"] == [{"site_id": "A", "work_date": "2024-03-05", "hours": 12.0}]
    assert len(attendance_repo.upserts) == 1


def test_save_labor_on_approved_site_is_forbidden(make_client, attendance_repo):
    resp = make_client().post("/api/attendance/day/2024-03-06/labor", json={"edits": {"B": 2}})
    assert resp.status_code == 403
    assert attendance_repo.upserts == []


def test_reconcile_reports_counts(make_client):
    body = make_client().post("/api/attendance/reconcile?month=2024-03").get_json()
    assert body["created"] == 1
    assert body["message"] == "1 record(s) recovered"


def test_reconcile_store_outage(make_client):
    resp = make_client(reconciliation=FakeReconciliation(StoreError("db down"))).post("/api/attendance/reconcile")
    assert resp.status_code == 503


def test_year_month_options(make_client):
    body = make_client().get("/api/attendance/year-months?month=2024-03").get_json()
    assert [o["value"] for o in body["options"]][:2] == ["2023-10", "2023-11"]
