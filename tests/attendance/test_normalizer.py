from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.site_ledger.site_ledger.attendance.normalizer import (
    infer_status,
    is_own_row,
    normalize_row,
    normalize_rows,
    resolve_labor_hours,
    resolve_work_hours,
)
from src.site_ledger.site_ledger.core.constants import UNASSIGNED_SITE_NAME
from src.site_ledger.site_ledger.core.enums import RecordStatus


@pytest.mark.parametrize("man_days", [0.5, 1, 1.5, 2, 3, 4])
def test_man_days_are_exactly_eight_hours_each(man_days):
    assert resolve_labor_hours({"man_days": man_days}) == man_days * 8


def test_man_days_take_priority_over_legacy_labor_hours():
    assert resolve_labor_hours({"man_days": 1, "labor_hours": 5, "work_hours": 3}) == 8


@pytest.mark.parametrize(
    "legacy, expected",
    [(2.5, 20), (3, 24), (3.5, 3.5), (5, 5), (0, 0)],
)
def test_legacy_labor_hours_boundary(legacy, expected):
    assert resolve_labor_hours({"labor_hours": legacy}) == expected


def test_labor_falls_back_to_work_hours_then_zero():
    assert resolve_labor_hours({"work_hours": 6}) == 6
    assert resolve_labor_hours({}) == 0
    assert resolve_labor_hours({"man_days": "abc", "labor_hours": None}) == 0


def test_non_finite_and_boolean_values_are_ignored():
    assert resolve_labor_hours({"man_days": float("nan"), "labor_hours": 1}) == 8
    assert resolve_labor_hours({"man_days": True, "work_hours": 4}) == 4


def test_numeric_strings_and_decimals_are_accepted():
    assert resolve_labor_hours({"man_days": "1.5"}) == 12
    assert resolve_labor_hours({"man_days": Decimal("0.5")}) == 4


def test_work_hours_prefers_explicit_value():
    assert resolve_work_hours({"work_hours": 7, "man_days": 1}) == 7
    assert resolve_work_hours({"man_days": 1}) == 8


@pytest.mark.parametrize(
    "row, expected",
    [
        ({"status": "approved"}, RecordStatus.APPROVED),
        ({"status": "IN_PROGRESS"}, RecordStatus.IN_PROGRESS),
        ({"status": "weird"}, RecordStatus.UNKNOWN),
        ({"check_in_time": "08:00"}, RecordStatus.IN_PROGRESS),
        ({"check_in_time": "08:00", "check_out_time": "17:00"}, RecordStatus.PRESENT),
        ({}, RecordStatus.ABSENT),
    ],
)
def test_infer_status(row, expected):
    assert infer_status(row) == expected


def test_is_own_row_compares_ids_as_strings():
    assert is_own_row({"user_id": 42}, "42")
    assert is_own_row({"profile_id": "u-1"}, "u-1")
    assert not is_own_row({"user_id": "u-2"}, "u-1")
    assert not is_own_row({"user_id": None}, None)


def test_normalize_row_truncates_date_and_reads_nested_site():
    rec = normalize_row(
        {
            "id": 9,
            "user_id": "me",
            "work_date": "2024-03-05T09:30:00",
            "man_days": 1,
            "status": "submitted",
            "site_id": 3,
            "sites": {"name": "강남 현장", "address": "Seoul"},
            "additional_notes": "rain",
        },
        "me",
    )
    assert rec.id == "9"
    assert rec.date == date(2024, 3, 5)
    assert rec.labor_hours == 8
    assert rec.work_hours == 8
    assert rec.site_id == "3"
    assert rec.site_name == "강남 현장"
    assert rec.site_address == "Seoul"
    assert rec.notes == "rain"
    assert rec.is_me is True


def test_normalize_row_degrades_instead_of_raising():
    rec = normalize_row({"work_date": "not-a-date", "man_days": "x", "work_hours": None}, "me")
    assert rec.date is None
    assert rec.work_hours == 0
    assert rec.labor_hours == 0
    assert rec.site_name == UNASSIGNED_SITE_NAME
    assert rec.is_me is False


def test_normalize_rows_sorts_by_date_and_skips_non_mappings():
    rows = [
        {"work_date": datetime(2024, 3, 7, 8, 0), "man_days": 1},
        "garbage",
        {"work_date": "2024-03-02", "man_days": 1},
    ]
    records = normalize_rows(rows, "me")
    assert [r.date for r in records] == [date(2024, 3, 2), date(2024, 3, 7)]
