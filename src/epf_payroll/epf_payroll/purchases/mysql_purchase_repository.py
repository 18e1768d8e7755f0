from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import PurchaseRepository


class MySQLPurchaseRepository(PurchaseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_status(self, company_id: str, period: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT approved_status FROM purchases WHERE company_id=%s AND period=%s",
                (company_id, period),
            )
            r = fetchone(cur)
            return r["approved_status"] if r else None
