from __future__ import annotations

from decimal import Decimal
from typing import Optional

from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Payment
from .repository import PaymentRepository


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_company_period(self, company_id: str, period: str) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payment_id, company_id, period, epf_amount, epf_surcharges, epf_reference_no,
                       epf_payment_method, epf_cheque_no, epf_pay_day, etf_amount, etf_surcharges,
                       etf_payment_method, etf_cheque_no, etf_pay_day, remark
                FROM payments
                WHERE company_id=%s AND period=%s
                """,
                (company_id, period),
            )
            r = fetchone(cur)
            return Payment.from_row(r) if r else None

    def insert_if_absent(self, payment: Payment) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payments(
                        company_id, period, epf_amount, epf_surcharges, epf_reference_no,
                        epf_payment_method, epf_cheque_no, epf_pay_day, etf_amount, etf_surcharges,
                        etf_payment_method, etf_cheque_no, etf_pay_day, remark
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        payment.company_id,
                        payment.period,
                        payment.epf_amount,
                        payment.epf_surcharges,
                        payment.epf_reference_no,
                        payment.epf_payment_method,
                        payment.epf_cheque_no,
                        payment.epf_pay_day,
                        payment.etf_amount,
                        payment.etf_surcharges,
                        payment.etf_payment_method,
                        payment.etf_cheque_no,
                        payment.etf_pay_day,
                        payment.remark,
                    ),
                )
                return str(cur.lastrowid)
        except mysql_errors.IntegrityError:
            return None

    def update_amounts(self, *, payment_id: str, epf_amount: Decimal, etf_amount: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payments SET epf_amount=%s, etf_amount=%s WHERE payment_id=%s",
                (epf_amount, etf_amount, payment_id),
            )
            return cur.rowcount > 0

    def update_reference(self, *, payment_id: str, epf_reference_no: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payments SET epf_reference_no=%s WHERE payment_id=%s",
                (epf_reference_no, payment_id),
            )
            return cur.rowcount > 0
