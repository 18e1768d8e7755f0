from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.epf_payroll.epf_payroll.container import build_services
from src.epf_payroll.epf_payroll.core.context import RequestContext
from src.epf_payroll.epf_payroll.core.enums import OtMethod, PurchaseStatus
from src.epf_payroll.epf_payroll.core.settings import EngineSettings

from tests.fakes import (
    COMPANY_ID,
    PERIOD,
    InMemoryCompanies,
    InMemoryEmployees,
    InMemoryHolidays,
    InMemoryPayments,
    InMemoryPurchases,
    InMemorySalaries,
    StubReferenceResolver,
    make_company,
    make_employee,
)


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(random_seed="test-seed")


@pytest.fixture
def repos():
    return SimpleNamespace(
        companies=InMemoryCompanies(make_company()),
        employees=InMemoryEmployees(
            make_employee("e1", member_no=1),
            make_employee("e2", member_no=2, ot_method=OtMethod.CALC),
        ),
        holidays=InMemoryHolidays(),
        purchases=InMemoryPurchases({(COMPANY_ID, PERIOD): PurchaseStatus.APPROVED.value}),
        salaries=InMemorySalaries(),
        payments=InMemoryPayments(),
        reference=StubReferenceResolver("REF-0001"),
    )


@pytest.fixture
def container(repos, settings):
    return build_services(
        settings=settings,
        companies=repos.companies,
        employees=repos.employees,
        holidays=repos.holidays,
        purchases=repos.purchases,
        salaries=repos.salaries,
        payments=repos.payments,
        reference_resolver=repos.reference,
    )


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(user_id="u1")
