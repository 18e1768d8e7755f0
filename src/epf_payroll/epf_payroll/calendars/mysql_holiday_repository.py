from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import CalendarName
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, *, start: date, end: date, calendar: Optional[CalendarName] = None) -> Sequence[Holiday]:
        sql = """
            SELECT holiday_date, calendar, summary, is_public, is_mercantile, is_bank
            FROM holidays
            WHERE holiday_date BETWEEN %s AND %s
        """
        params: list = [start, end]
        if calendar:
            sql += " AND calendar=%s"
            params.append(calendar.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY holiday_date", tuple(params))
            return [
                Holiday(
                    holiday_date=r["holiday_date"],
                    calendar=CalendarName(r["calendar"]),
                    summary=r.get("summary") or "",
                    public=bool(r.get("is_public")),
                    mercantile=bool(r.get("is_mercantile")),
                    bank=bool(r.get("is_bank")),
                )
                for r in fetchall(cur)
            ]
