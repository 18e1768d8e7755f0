from __future__ import annotations

import random
from datetime import datetime
from decimal import Decimal

import pytest

from src.epf_payroll.epf_payroll.attendance.model import InOutEvent
from src.epf_payroll.epf_payroll.calendars.model import HolidayCalendar
from src.epf_payroll.epf_payroll.core.enums import CalendarName, GenerationMode, OtMethod
from src.epf_payroll.epf_payroll.core.exceptions import MissingAttendanceError
from src.epf_payroll.epf_payroll.core.settings import EngineSettings
from src.epf_payroll.epf_payroll.employees.resolution import resolve_employee
from src.epf_payroll.epf_payroll.payroll.aggregator import SalaryAggregator
from src.epf_payroll.epf_payroll.payroll.calculator.standard_calculator import StandardSalaryCalculator
from src.epf_payroll.epf_payroll.payroll.model import Salary
from src.epf_payroll.epf_payroll.payroll.structure import PaymentStructure
from src.epf_payroll.epf_payroll.shifts.resolver import ShiftResolver

from tests.fakes import COMPANY_ID, PERIOD, make_company, make_employee

CALENDAR = HolidayCalendar.of(CalendarName.DEFAULT, [])


@pytest.fixture
def aggregator():
    return SalaryAggregator(
        resolver=ShiftResolver(),
        calculator=StandardSalaryCalculator(),
        settings=EngineSettings(),
    )


def build(aggregator, employee, **kwargs):
    return aggregator.build(
        employee=resolve_employee(employee, make_company()),
        company_id=COMPANY_ID,
        period=PERIOD,
        calendar=CALENDAR,
        **kwargs,
    )


def test_no_ot_without_attendance_is_basic_minus_epf(aggregator):
    result = build(aggregator, make_employee())

    assert result.salary.final_salary == Decimal("19320.00")
    assert result.salary.no_pay.amount == Decimal("0.00")
    assert result.salary.in_out == ()


def test_calc_without_attendance_fails_for_that_employee(aggregator):
    with pytest.raises(MissingAttendanceError) as exc:
        build(aggregator, make_employee("e2", ot_method=OtMethod.CALC))
    assert exc.value.message == "InOut required for calculated OT: Employee e2"


def test_known_attendance_charges_absent_days(aggregator):
    punches = [datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 17)]

    salary = build(aggregator, make_employee(), punches=punches).salary

    # 20 absent full days at 700.00 and 5 absent Saturdays at 350.00
    assert salary.no_pay.amount == Decimal("15750.00")
    assert salary.no_pay.reason == "25 absent day(s)"
    assert len(salary.in_out) == 1


def test_calc_sums_ot_across_events(aggregator):
    punches = [
        datetime(2024, 3, 4, 8),
        datetime(2024, 3, 4, 19),
        datetime(2024, 3, 5, 8),
        datetime(2024, 3, 5, 18),
    ]

    salary = build(aggregator, make_employee(ot_method=OtMethod.CALC), punches=punches).salary

    assert salary.ot.amount == Decimal("393.75")
    assert salary.ot.reason == "3.00h overtime"


def test_unpaired_punch_is_warned_and_events_outside_period_skipped(aggregator):
    punches = [
        datetime(2024, 2, 28, 8),
        datetime(2024, 2, 28, 17),
        datetime(2024, 3, 4, 8),
        datetime(2024, 3, 4, 17),
        datetime(2024, 3, 5, 8),
    ]

    result = build(aggregator, make_employee(ot_method=OtMethod.CALC), punches=punches)

    assert [w.code for w in result.warnings] == ["unpaired_punch"]
    assert [e.work_date.isoformat() for e in result.salary.in_out] == ["2024-03-04"]


def test_random_method_ignores_supplied_attendance(aggregator):
    punches = [datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 17)]

    result = build(aggregator, make_employee(ot_method=OtMethod.RANDOM), punches=punches, rng=random.Random(7))
    again = build(aggregator, make_employee(ot_method=OtMethod.RANDOM), rng=random.Random(7))

    assert [w.code for w in result.warnings] == ["attendance_ignored"]
    assert result.salary.in_out == again.salary.in_out
    assert result.salary.final_salary == again.salary.final_salary


def test_update_keeps_manual_fields_and_snapshot(aggregator):
    snapshot = PaymentStructure.from_dict(
        {"additions": [{"name": "Allowance", "amount": "500", "affectTotalEarnings": True}]}
    )
    existing = Salary(
        salary_id="9",
        employee_id="e1",
        company_id=COMPANY_ID,
        period=PERIOD,
        basic=Decimal("20000.00"),
        payment_structure=snapshot,
        advance_amount=Decimal("1000.00"),
        remark="paid advance",
    )
    edited = [InOutEvent(in_time=datetime(2024, 3, 4, 8), out_time=datetime(2024, 3, 4, 19), remark="late train")]
    employee = make_employee(basic=Decimal("50000.00"), ot_method=OtMethod.CALC)

    salary = build(aggregator, employee, mode=GenerationMode.UPDATE, events=edited, existing=existing).salary

    assert salary.salary_id == "9"
    assert salary.basic == Decimal("20000.00")
    assert salary.remark == "paid advance"
    assert salary.advance_amount == Decimal("1000.00")
    assert salary.payment_structure.total_additions() == Decimal("500.00")
    assert salary.in_out[0].remark == "late train"
    # 20000 / 240 * 1.5 * 2h
    assert salary.ot.amount == Decimal("250.00")
    # (20000 + 500 - absent days) * 8%
    assert salary.epf_deduction == StandardSalaryCalculator().epf_deduction(salary)
