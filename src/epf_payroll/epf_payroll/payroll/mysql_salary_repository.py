from __future__ import annotations

from typing import Iterable, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, in_clause, to_json
from .model import Salary
from .repository import SalaryRepository

_COLUMNS = """
    salary_id, employee_id, company_id, period, basic, holiday_pay, in_out,
    ot_amount, ot_reason, no_pay_amount, no_pay_reason, payment_structure,
    advance_amount, final_salary, remark
"""


def _to_salary(r: dict) -> Salary:
    return Salary.from_dict(
        {
            "id": r["salary_id"],
            "employee": r["employee_id"],
            "company": r["company_id"],
            "period": r["period"],
            "basic": r["basic"],
            "holidayPay": r["holiday_pay"],
            "inOut": from_json(r.get("in_out")) or [],
            "ot": {"amount": r["ot_amount"], "reason": r.get("ot_reason")},
            "noPay": {"amount": r["no_pay_amount"], "reason": r.get("no_pay_reason")},
            "paymentStructure": from_json(r.get("payment_structure")),
            "advanceAmount": r["advance_amount"],
            "finalSalary": r["final_salary"],
            "remark": r.get("remark"),
        }
    )


def _params(s: Salary) -> tuple:
    return (
        s.basic,
        s.holiday_pay,
        to_json([e.to_dict() for e in s.in_out]),
        s.ot.amount,
        s.ot.reason,
        s.no_pay.amount,
        s.no_pay.reason,
        to_json(s.payment_structure.to_dict()),
        s.advance_amount,
        s.final_salary,
        s.remark,
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, salary_id: str) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salaries WHERE salary_id=%s", (salary_id,))
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def get_for_employee_period(self, employee_id: str, period: str) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE employee_id=%s AND period=%s",
                (employee_id, period),
            )
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def list_for_employees(self, employee_ids: Iterable[str], period: str) -> Sequence[Salary]:
        ids = [str(i) for i in employee_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE period=%s AND employee_id IN ({in_clause(ids)})",
                (period, *ids),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def list_for_company_period(self, company_id: str, period: str) -> Sequence[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE company_id=%s AND period=%s ORDER BY salary_id",
                (company_id, period),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def insert_if_absent(self, salary: Salary) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salaries(
                        employee_id, company_id, period, basic, holiday_pay, in_out,
                        ot_amount, ot_reason, no_pay_amount, no_pay_reason,
                        payment_structure, advance_amount, final_salary, remark
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (salary.employee_id, salary.company_id, salary.period, *_params(salary)),
                )
                return str(cur.lastrowid)
        except mysql_errors.IntegrityError:
            # uq_salary_employee_period: another writer got there first.
            return None

    def update(self, salary: Salary) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salaries
                SET basic=%s, holiday_pay=%s, in_out=%s, ot_amount=%s, ot_reason=%s,
                    no_pay_amount=%s, no_pay_reason=%s, payment_structure=%s,
                    advance_amount=%s, final_salary=%s, remark=%s
                WHERE salary_id=%s
                """,
                (*_params(salary), salary.salary_id),
            )
            return cur.rowcount > 0

    def delete(self, salary_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salaries WHERE salary_id=%s", (salary_id,))
            return cur.rowcount > 0
