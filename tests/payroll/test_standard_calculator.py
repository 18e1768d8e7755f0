from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from src.epf_payroll.epf_payroll.payroll.calculator.standard_calculator import StandardSalaryCalculator
from src.epf_payroll.epf_payroll.payroll.model import AmountReason, Salary
from src.epf_payroll.epf_payroll.payroll.structure import PaymentStructure

from tests.fakes import COMPANY_ID, PERIOD

STRUCTURE = PaymentStructure.from_dict(
    {
        "additions": [
            {"name": "Allowance", "amount": "2000", "affectTotalEarnings": True},
            {"name": "Bonus", "amount": "1000", "affectTotalEarnings": False},
            {"name": "Incentive", "amount": "2000-3000", "affectTotalEarnings": True},
        ],
        "deductions": [
            {"name": "Loan", "amount": "500", "affectTotalEarnings": False},
            {"name": "Welfare", "amount": "200", "affectTotalEarnings": True},
        ],
    }
)


def salary(**kwargs) -> Salary:
    data = dict(employee_id="e1", company_id=COMPANY_ID, period=PERIOD, basic=Decimal("21000.00"))
    data.update(kwargs)
    return Salary(**data)


def test_scenario_basic_only_deducts_epf_from_final_salary():
    result = StandardSalaryCalculator().recalculate(salary())

    assert result.epf_deduction == Decimal("1680.00")
    assert result.final_salary == Decimal("19320.00")
    assert [d.name for d in result.payment_structure.deductions] == ["EPF 8%"]


def test_final_salary_and_epf_follow_the_formulas():
    result = StandardSalaryCalculator().recalculate(
        salary(
            holiday_pay=Decimal("700.00"),
            ot=AmountReason(Decimal("262.50"), "2.00h overtime"),
            no_pay=AmountReason(Decimal("300.00"), "short"),
            payment_structure=STRUCTURE,
        )
    )

    # 21000 + 700 + 2000 - 200 - 300 = 23200; ranges are never summed
    assert result.epf_deduction == Decimal("1856.00")
    # 21000 + 700 + 262.50 + 3000 - (500 + 200 + 1856) - 300
    assert result.final_salary == Decimal("22106.50")


@pytest.mark.parametrize(
    "change",
    [
        {"basic": Decimal("30000.00")},
        {"holiday_pay": Decimal("1250.75")},
        {"no_pay": AmountReason(Decimal("875.00"), "absent")},
        {"ot": AmountReason(Decimal("999.99"), "ot")},
        {
            "payment_structure": PaymentStructure.from_dict(
                {"additions": [{"name": "Travel", "amount": "1234.56", "affectTotalEarnings": True}]}
            )
        },
    ],
)
def test_recalculating_after_a_change_matches_a_fresh_computation(change):
    calc = StandardSalaryCalculator()
    before = calc.recalculate(salary(payment_structure=STRUCTURE))

    edited = calc.recalculate(replace(before, **change))
    fresh = calc.recalculate(replace(salary(payment_structure=STRUCTURE), **change))

    assert edited.epf_deduction == fresh.epf_deduction
    assert edited.final_salary == fresh.final_salary
    assert edited.epf_deduction == (calc.earnings_base(edited) * Decimal("0.08")).quantize(Decimal("0.01"))
    assert len([d for d in edited.payment_structure.deductions if d.is_epf]) == 1


def test_final_salary_is_exact_to_the_cent():
    s = StandardSalaryCalculator().recalculate(
        salary(basic=Decimal("12345.67"), no_pay=AmountReason(Decimal("0.01"), "x"), payment_structure=STRUCTURE)
    )
    structure = s.payment_structure
    expected = (
        s.basic + s.holiday_pay + s.ot.amount + structure.total_additions() - structure.total_deductions() - s.no_pay.amount
    )
    assert s.final_salary == expected
