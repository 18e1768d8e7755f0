from __future__ import annotations

import threading
import time
from dataclasses import replace
from decimal import Decimal

import pytest

from src.epf_payroll.epf_payroll.core.exceptions import NotFoundError
from src.epf_payroll.epf_payroll.payments.model import Payment

from tests.fakes import COMPANY_ID, PERIOD, make_employee

CSV = "memberno,time\n2,2024-03-04T08:00:00\n2,2024-03-04T17:00:00\n"


def generate_salaries(container, ctx):
    return container.salary_service.generate_salaries(ctx, company_id=COMPANY_ID, period=PERIOD, in_out_csv=CSV)


def generate_payment(container, ctx, **kwargs):
    return container.payment_service.generate_payment(ctx, company_id=COMPANY_ID, period=PERIOD, **kwargs)


def test_payment_needs_salaries(container, ctx):
    with pytest.raises(NotFoundError) as exc:
        generate_payment(container, ctx)
    assert exc.value.message == "Salary data not found for 2024-03"


def test_epf_is_the_sum_of_salary_epf_deductions(container, ctx, repos):
    generate_salaries(container, ctx)
    salaries = repos.salaries.list_for_company_period(COMPANY_ID, PERIOD)

    result = generate_payment(container, ctx)

    assert result.exists is False
    assert result.payment.epf_amount == sum((s.epf_deduction for s in salaries), Decimal("0.00"))
    assert result.payment.epf_payment_method == "Cheque"
    assert result.payment.etf_payment_method == "Cheque"
    assert result.payment.epf_reference_no == "REF-0001"
    assert repos.reference.calls == [("A/12345", PERIOD)]


def test_etf_uses_the_configured_rate_on_the_earnings_base(container, ctx, repos):
    container.salary_service.generate_salaries(ctx, company_id=COMPANY_ID, period=PERIOD, employee_ids=["e1"])

    payment = generate_payment(container, ctx).payment

    assert payment.epf_amount == Decimal("1680.00")
    assert payment.etf_amount == Decimal("630.00")


def test_existing_payment_is_returned_as_data(container, ctx, repos):
    generate_salaries(container, ctx)
    first = generate_payment(container, ctx)

    second = generate_payment(container, ctx)

    assert second.exists is True
    assert second.payment == repos.payments.rows[first.payment.payment_id]
    assert len(repos.payments.rows) == 1


def test_regenerate_updates_amounts_only(container, ctx, repos):
    container.salary_service.generate_salaries(ctx, company_id=COMPANY_ID, period=PERIOD, employee_ids=["e1"])
    first = generate_payment(container, ctx).payment
    repos.payments.rows[first.payment_id] = replace(first, epf_cheque_no="000123", epf_pay_day="2024-04-10")

    repos.employees.employees.append(make_employee("e9", member_no=9, basic=Decimal("30000.00")))
    container.salary_service.generate_salaries(ctx, company_id=COMPANY_ID, period=PERIOD, employee_ids=["e9"])
    result = generate_payment(container, ctx, regenerate=True)

    stored = repos.payments.rows[first.payment_id]
    assert result.regenerated is True
    assert stored.epf_amount == Decimal("4080.00")
    assert stored.etf_amount == Decimal("1530.00")
    assert stored.epf_cheque_no == "000123"
    assert stored.epf_pay_day == "2024-04-10"
    assert stored.epf_reference_no == "REF-0001"
    # The reference was already known; no second lookup.
    assert len(repos.reference.calls) == 1


def test_reference_failure_is_a_warning(container, ctx, repos):
    repos.reference.reference_no = None
    generate_salaries(container, ctx)

    result = generate_payment(container, ctx)

    assert result.payment.payment_id is not None
    assert result.payment.epf_reference_no == ""
    assert result.warnings and result.warnings[0].startswith("Reference number not found")


def test_payment_dict_uses_camel_case(container, ctx):
    generate_salaries(container, ctx)
    data = generate_payment(container, ctx).to_dict()

    assert set(data) == {"payment", "exists", "regenerated", "warnings"}
    assert {"epfAmount", "etfAmount", "epfReferenceNo", "epfChequeNo", "etfPayDay"} <= set(data["payment"])


def test_payment_model_from_row():
    payment = Payment.from_row(
        {
            "payment_id": 5,
            "company_id": "c1",
            "period": "2024-03",
            "epf_amount": Decimal("10"),
            "etf_amount": "3.755",
            "epf_reference_no": None,
        }
    )
    assert payment.payment_id == "5"
    assert payment.etf_amount == Decimal("3.76")
    assert payment.epf_reference_no == ""


def test_payment_waits_for_an_in_flight_salary_commit(container, ctx, repos):
    started = threading.Event()
    release = threading.Event()
    insert = repos.salaries.insert_if_absent

    def slow_insert(salary):
        started.set()
        release.wait(timeout=5)
        return insert(salary)

    repos.salaries.insert_if_absent = slow_insert
    preview = container.salary_service.preview(ctx, company_id=COMPANY_ID, period=PERIOD, employee_ids=["e1"])
    payments = []

    committer = threading.Thread(target=container.salary_service.commit, args=(preview.salaries,))
    committer.start()
    assert started.wait(timeout=5)
    payer = threading.Thread(target=lambda: payments.append(generate_payment(container, ctx)))
    payer.start()

    time.sleep(0.1)
    assert payer.is_alive()
    release.set()
    committer.join(timeout=5)
    payer.join(timeout=5)

    assert payments[0].payment.epf_amount == Decimal("1680.00")
