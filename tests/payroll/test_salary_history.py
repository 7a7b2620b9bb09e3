from __future__ import annotations

from datetime import date

from src.site_ledger.site_ledger.attendance.model import AttendanceRecord
from src.site_ledger.site_ledger.core.enums import RecordStatus
from src.site_ledger.site_ledger.payroll.service import PayrollReportService, year_month_label


def _rec(day, hours=8.0):
    return AttendanceRecord(
        id=None,
        date=day,
        work_hours=hours,
        labor_hours=hours,
        status=RecordStatus.APPROVED,
        is_me=True,
        site_id="A",
    )


def test_short_history_covers_three_months_newest_first():
    records = [_rec(date(2024, 3, 4)), _rec(date(2024, 2, 10), 4.0), _rec(date(2023, 12, 1))]
    history = PayrollReportService().build_salary_history(records, date(2024, 3, 15))

    assert [h.year_month for h in history] == ["2024-03", "2024-02", "2024-01"]
    assert history[0].paid_date == date(2024, 3, 31)
    assert history[0].stats.total_man_days == 1.0
    assert history[1].stats.total_man_days == 0.5
    assert history[2].stats.work_days == 0


def test_full_history_uses_lookback():
    history = PayrollReportService(lookback_months=12).build_salary_history([], date(2024, 3, 1), show_all=True)
    assert len(history) == 12
    assert history[-1].year_month == "2023-04"


def test_year_month_options_start_five_months_back():
    options = PayrollReportService.year_month_options(date(2024, 3, 18))
    assert len(options) == 12
    assert options[0].value == "2023-10"
    assert options[5].value == "2024-03"
    assert options[-1].value == "2024-09"
    assert options[5].label == year_month_label(date(2024, 3, 1)) == "2024년 03월"
