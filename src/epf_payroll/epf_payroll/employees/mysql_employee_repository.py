from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, in_clause
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, company_id, member_no, name, nic, basic, divide_by, ot_method,
    shifts, working_days, probabilities, payment_structure, calendar, overrides, active
"""


def _to_employee(r: dict) -> Employee:
    return Employee.from_dict(
        {
            "id": r["employee_id"],
            "company": r["company_id"],
            "memberNo": r["member_no"],
            "name": r["name"],
            "nic": r["nic"],
            "basic": r["basic"],
            "divideBy": r.get("divide_by"),
            "otMethod": r.get("ot_method"),
            "shifts": from_json(r.get("shifts")),
            "workingDays": from_json(r.get("working_days")),
            "probabilities": from_json(r.get("probabilities")),
            "paymentStructure": from_json(r.get("payment_structure")),
            "calendar": r.get("calendar"),
            "overrides": from_json(r.get("overrides")),
            "active": bool(r.get("active")),
        }
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_for_company(self, company_id: str, *, active_only: bool = True) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s"
        if active_only:
            sql += " AND active=1"
        sql += " ORDER BY member_no"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (company_id,))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_ids(self, company_id: str, employee_ids: Iterable[str]) -> Sequence[Employee]:
        ids = [str(i) for i in employee_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM employees
                WHERE company_id=%s AND employee_id IN ({in_clause(ids)})
                ORDER BY member_no
                """,
                (company_id, *ids),
            )
            return [_to_employee(r) for r in fetchall(cur)]
