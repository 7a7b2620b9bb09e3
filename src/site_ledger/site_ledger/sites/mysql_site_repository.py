from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Site, SiteAssignment
from .repository import SiteRepository


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_sites(self) -> Sequence[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, address FROM sites ORDER BY name ASC")
            return [
                Site(id=str(r["id"]), name=r["name"], address=r.get("address"))
                for r in fetchall(cur)
            ]

    def list_assignments(self, identity: str) -> Sequence[SiteAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sa.site_id, sa.is_active, sa.assigned_date, s.name AS site_name
                FROM site_assignments sa
                LEFT JOIN sites s ON s.id = sa.site_id
                WHERE sa.user_id=%s
                ORDER BY sa.assigned_date DESC
                """,
                (identity,),
            )
            return [
                SiteAssignment(
                    site_id=str(r["site_id"]) if r.get("site_id") is not None else None,
                    site_name=r.get("site_name"),
                    active=bool(r.get("is_active", 1)),
                    assigned_date=r.get("assigned_date"),
                )
                for r in fetchall(cur)
            ]
