from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from .model import Payment


class PaymentRepository(Protocol):
    def get_for_company_period(self, company_id: str, period: str) -> Optional[Payment]:
        raise NotImplementedError

    def insert_if_absent(self, payment: Payment) -> Optional[str]:
        """Atomic compare-and-insert on (company, period); None when one exists."""

        raise NotImplementedError

    def update_amounts(self, *, payment_id: str, epf_amount: Decimal, etf_amount: Decimal) -> bool:
        """Only the computed amounts; method/reference/cheque/pay-day stay untouched."""

        raise NotImplementedError

    def update_reference(self, *, payment_id: str, epf_reference_no: str) -> bool:
        raise NotImplementedError
