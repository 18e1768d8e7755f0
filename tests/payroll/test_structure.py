from __future__ import annotations

from decimal import Decimal

import pytest

from src.epf_payroll.epf_payroll.common.money import AmountRange, parse_amount, to_money
from src.epf_payroll.epf_payroll.core.exceptions import MissingFieldError, ValidationError
from src.epf_payroll.epf_payroll.payroll.structure import PaymentStructure


def test_money_rounds_half_up():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(2) == Decimal("2.00")


def test_range_amount_is_not_a_number():
    amount = parse_amount("2000-3000", field="x")
    assert amount == AmountRange(Decimal("2000.00"), Decimal("3000.00"))
    assert str(amount) == "2000-3000"


def test_negative_plain_amount_is_not_a_range():
    assert parse_amount("-500", field="x") == Decimal("-500.00")


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError):
        parse_amount("3000-2000", field="x")


def test_blank_amount_flags_the_field():
    with pytest.raises(MissingFieldError) as exc:
        PaymentStructure.from_dict({"additions": [{"name": "Allowance", "amount": ""}]})
    assert exc.value.field == "paymentStructure.additions[Allowance].amount"
    assert exc.value.to_dict()["kind"] == "missing_data"


def test_structure_always_has_exactly_one_epf_deduction():
    structure = PaymentStructure.from_dict(
        {
            "deductions": [
                {"name": "EPF 8%", "amount": "100"},
                {"name": "EPF 8%", "amount": ""},
                {"name": "Loan", "amount": "500"},
            ]
        }
    )
    assert [d.name for d in structure.deductions] == ["Loan", "EPF 8%"]
    assert structure.epf_amount == Decimal("100.00")


def test_totals_skip_ranges_and_earnings_totals_skip_epf():
    structure = PaymentStructure.from_dict(
        {
            "additions": [
                {"name": "A", "amount": "100", "affectTotalEarnings": True},
                {"name": "B", "amount": "50-75", "affectTotalEarnings": True},
            ],
            "deductions": [{"name": "EPF 8%", "amount": "80"}, {"name": "C", "amount": "20", "affectTotalEarnings": True}],
        }
    )
    assert structure.total_additions() == Decimal("100.00")
    assert structure.earnings_additions() == Decimal("100.00")
    assert structure.total_deductions() == Decimal("100.00")
    assert structure.earnings_deductions() == Decimal("20.00")


def test_structure_round_trips_ranges_as_text():
    data = PaymentStructure.from_dict({"additions": [{"name": "B", "amount": "50-75"}]}).to_dict()
    assert data["additions"][0]["amount"] == "50-75"
    assert data["deductions"][0] == {"name": "EPF 8%", "amount": "0.00", "affectTotalEarnings": False}
