from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .calendars.mysql_holiday_repository import MySQLHolidayRepository
from .calendars.repository import HolidayRepository
from .common.locks import KeyedLocks
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.repository import CompanyRepository
from .core.settings import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .orchestration.saga import AutoGenerateSaga, DocumentGenerator
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.reference import CbslReferenceResolver, ReferenceResolver
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import SalaryService
from .purchases.gate import EntitlementGate
from .purchases.mysql_purchase_repository import MySQLPurchaseRepository
from .purchases.repository import PurchaseRepository


@dataclass(frozen=True)
class Container:
    settings: EngineSettings

    companies_repo: CompanyRepository
    employees_repo: EmployeeRepository
    holidays_repo: HolidayRepository
    purchases_repo: PurchaseRepository
    salaries_repo: SalaryRepository
    payments_repo: PaymentRepository

    gate: EntitlementGate
    reference_resolver: Optional[ReferenceResolver]
    salary_service: SalaryService
    payment_service: PaymentService
    auto_generate: AutoGenerateSaga


def build_services(
    *,
    settings: EngineSettings,
    companies: CompanyRepository,
    employees: EmployeeRepository,
    holidays: HolidayRepository,
    purchases: PurchaseRepository,
    salaries: SalaryRepository,
    payments: PaymentRepository,
    reference_resolver: ReferenceResolver | None = None,
    documents: DocumentGenerator | None = None,
) -> Container:
    """Wire services over any repository implementations."""
    # Salary commits and payment generation must see the same locks.
    locks = KeyedLocks()
    gate = EntitlementGate(purchases)
    salary_service = SalaryService(
        companies=companies,
        employees=employees,
        salaries=salaries,
        holidays=holidays,
        gate=gate,
        settings=settings,
        locks=locks,
    )
    payment_service = PaymentService(
        companies=companies,
        salaries=salaries,
        payments=payments,
        gate=gate,
        settings=settings,
        reference_resolver=reference_resolver,
        locks=locks,
    )
    return Container(
        settings=settings,
        companies_repo=companies,
        employees_repo=employees,
        holidays_repo=holidays,
        purchases_repo=purchases,
        salaries_repo=salaries,
        payments_repo=payments,
        gate=gate,
        reference_resolver=reference_resolver,
        salary_service=salary_service,
        payment_service=payment_service,
        auto_generate=AutoGenerateSaga(salaries=salary_service, payments=payment_service, documents=documents),
    )


def build_container(*, db_config: dict, settings: EngineSettings | None = None) -> Container:
    settings = settings or EngineSettings()
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        settings=settings,
        companies=MySQLCompanyRepository(conn),
        employees=MySQLEmployeeRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        purchases=MySQLPurchaseRepository(conn),
        salaries=MySQLSalaryRepository(conn),
        payments=MySQLPaymentRepository(conn),
        reference_resolver=CbslReferenceResolver(
            settings.reference_lookup_url,
            timeout=settings.reference_lookup_timeout,
        ),
    )
