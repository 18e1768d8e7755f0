from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from ...common.money import to_money
from ...core.constants import EPF_RATE
from ..model import Salary
from .base import SalaryCalculator


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule.

    earnings base = basic + holidayPay + earnings additions
                    - earnings deductions (EPF excluded) - noPay
    EPF           = 8% of the earnings base
    final salary  = basic + holidayPay + OT + additions - deductions - noPay
    """

    def __init__(self, epf_rate: Decimal = EPF_RATE):
        self._epf_rate = Decimal(epf_rate)

    def earnings_base(self, salary: Salary) -> Decimal:
        structure = salary.payment_structure
        return to_money(
            salary.basic
            + salary.holiday_pay
            + structure.earnings_additions()
            - structure.earnings_deductions()
            - salary.no_pay.amount
        )

    def epf_deduction(self, salary: Salary) -> Decimal:
        return to_money(self.earnings_base(salary) * self._epf_rate)

    def final_salary(self, salary: Salary) -> Decimal:
        structure = salary.payment_structure
        return to_money(
            salary.basic
            + salary.holiday_pay
            + salary.ot.amount
            + structure.total_additions()
            - structure.total_deductions()
            - salary.no_pay.amount
        )

    def recalculate(self, salary: Salary) -> Salary:
        with_epf = replace(salary, payment_structure=salary.payment_structure.with_epf(self.epf_deduction(salary)))
        return replace(with_epf, final_salary=self.final_salary(with_epf))
