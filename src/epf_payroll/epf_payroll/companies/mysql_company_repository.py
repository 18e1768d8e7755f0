from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_json
from .model import Company
from .repository import CompanyRepository


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, user_id, name, employer_no, payment_method, mode,
                       shifts, working_days, probabilities, payment_structure, calendar
                FROM companies
                WHERE company_id=%s
                """,
                (company_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Company.from_dict(
                {
                    "id": r["company_id"],
                    "user": r.get("user_id"),
                    "name": r["name"],
                    "employerNo": r["employer_no"],
                    "paymentMethod": r.get("payment_method"),
                    "mode": r.get("mode"),
                    "shifts": from_json(r.get("shifts")),
                    "workingDays": from_json(r.get("working_days")),
                    "probabilities": from_json(r.get("probabilities")),
                    "paymentStructure": from_json(r.get("payment_structure")),
                    "calendar": r.get("calendar"),
                }
            )
