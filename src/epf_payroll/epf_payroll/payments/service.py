from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Sequence

from ..common.locks import KeyedLocks, company_period_key
from ..common.money import money_sum, to_money
from ..common.validators import require_period
from ..companies.access import load_company
from ..companies.model import Company
from ..companies.repository import CompanyRepository
from ..core.context import RequestContext
from ..core.exceptions import DomainError, NotFoundError
from ..core.settings import EngineSettings
from ..payroll.calculator.base import SalaryCalculator
from ..payroll.calculator.standard_calculator import StandardSalaryCalculator
from ..payroll.model import Salary
from ..payroll.repository import SalaryRepository
from ..purchases.gate import EntitlementGate
from .model import Payment
from .reference import ReferenceResolver
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentAmounts:
    epf_amount: Decimal
    etf_amount: Decimal


@dataclass(frozen=True)
class PaymentResult:
    """``exists`` is set when a payment was already there and nothing was written."""

    payment: Payment
    exists: bool = False
    regenerated: bool = False
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "payment": self.payment.to_dict(),
            "exists": self.exists,
            "regenerated": self.regenerated,
            "warnings": list(self.warnings),
        }


class PaymentService:
    """One EPF/ETF payment per company-period, summed from its salaries.

    EPF is the sum of the salaries' EPF deductions; ETF applies the configured
    rate to each salary's earnings base. Regeneration rewrites only the two
    amounts. The reference number is looked up when still empty; a failed
    lookup becomes a warning on the result.
    """

    def __init__(
        self,
        *,
        companies: CompanyRepository,
        salaries: SalaryRepository,
        payments: PaymentRepository,
        gate: EntitlementGate,
        settings: EngineSettings,
        reference_resolver: ReferenceResolver | None = None,
        locks: KeyedLocks | None = None,
        calculator: SalaryCalculator | None = None,
    ):
        self._companies = companies
        self._salaries = salaries
        self._payments = payments
        self._gate = gate
        self._settings = settings
        self._reference = reference_resolver
        self._locks = locks or KeyedLocks()
        self._calculator = calculator or StandardSalaryCalculator()

    def compute_amounts(self, salaries: Sequence[Salary]) -> PaymentAmounts:
        rate = Decimal(self._settings.etf_rate)
        return PaymentAmounts(
            epf_amount=money_sum(s.epf_deduction for s in salaries),
            etf_amount=money_sum(to_money(self._calculator.earnings_base(s) * rate) for s in salaries),
        )

    def generate_payment(
        self,
        ctx: RequestContext,
        *,
        company_id: str,
        period: str,
        regenerate: bool = False,
        resolve_reference: bool = True,
    ) -> PaymentResult:
        period = require_period(period)
        company = load_company(self._companies, ctx, company_id)
        self._gate.check(ctx, company, period)

        with self._locks.hold(company_period_key(company.company_id, period)):
            salaries = list(self._salaries.list_for_company_period(company.company_id, period))
            if not salaries:
                raise NotFoundError(f"Salary data not found for {period}")
            amounts = self.compute_amounts(salaries)

            existing = self._payments.get_for_company_period(company.company_id, period)
            if existing and not regenerate:
                logger.info("Payment for %s %s already exists", company.company_id, period)
                return PaymentResult(payment=existing, exists=True)

            if existing:
                self._payments.update_amounts(
                    payment_id=existing.payment_id,
                    epf_amount=amounts.epf_amount,
                    etf_amount=amounts.etf_amount,
                )
                payment = replace(existing, epf_amount=amounts.epf_amount, etf_amount=amounts.etf_amount)
                regenerated = True
            else:
                payment = self._new_payment(company, period, amounts)
                new_id = self._payments.insert_if_absent(payment)
                if new_id is None:
                    current = self._payments.get_for_company_period(company.company_id, period)
                    return PaymentResult(payment=current or payment, exists=True)
                payment = replace(payment, payment_id=new_id)
                regenerated = False

            warnings: list[str] = []
            if resolve_reference and not payment.epf_reference_no:
                payment = self._attach_reference(company, payment, warnings)

        logger.info(
            "Payment for %s %s: EPF %s, ETF %s%s",
            company.company_id,
            period,
            payment.epf_amount,
            payment.etf_amount,
            " (regenerated)" if regenerated else "",
        )
        return PaymentResult(payment=payment, regenerated=regenerated, warnings=tuple(warnings))

    @staticmethod
    def _new_payment(company: Company, period: str, amounts: PaymentAmounts) -> Payment:
        return Payment(
            company_id=company.company_id,
            period=period,
            epf_amount=amounts.epf_amount,
            etf_amount=amounts.etf_amount,
            epf_payment_method=company.payment_method,
            etf_payment_method=company.payment_method,
        )

    def _attach_reference(self, company: Company, payment: Payment, warnings: list[str]) -> Payment:
        if self._reference is None:
            return payment
        try:
            info = self._reference.lookup(company.employer_no, payment.period)
        except DomainError as e:
            logger.warning("No EPF reference for %s %s: %s", company.company_id, payment.period, e.message)
            warnings.append(f"Reference number not found: {e.message}")
            return payment
        self._payments.update_reference(payment_id=payment.payment_id, epf_reference_no=info.reference_no)
        return replace(payment, epf_reference_no=info.reference_no)
