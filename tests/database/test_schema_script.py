from __future__ import annotations

from pathlib import Path

from src.site_ledger.site_ledger.database.bootstrap import iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_ignores_semicolons_inside_literals():
    sql = "INSERT INTO t VALUES('a;b');\nSELECT 1;\n  \nSELECT 2"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES('a;b')", "SELECT 1", "SELECT 2"]


def test_schema_creates_every_ledger_table():
    statements = list(iter_sql_statements(SCHEMA.read_text(encoding="utf-8")))
    created = " ".join(s for s in statements if "CREATE TABLE" in s.upper())
    for table in ("sites", "profiles", "site_assignments", "daily_reports", "worker_assignments", "work_records"):
        assert f"CREATE TABLE IF NOT EXISTS {table} " in created
