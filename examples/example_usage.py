"""Example: drive the service layer directly (no Flask).

Previews a month of salaries for one company, commits them, then builds the
EPF/ETF payment. Controllers are thin; the same calls back the HTTP API.
"""

import importlib
import sys

from config import get_settings_module

from src.epf_payroll.epf_payroll.container import build_container
from src.epf_payroll.epf_payroll.core.context import RequestContext
from src.epf_payroll.epf_payroll.core.enums import Role
from src.epf_payroll.epf_payroll.core.settings import EngineSettings


def main(company_id: str, period: str):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=EngineSettings.from_module(settings))
    ctx = RequestContext(user_id="example", role=Role.ADMIN)

    preview = container.salary_service.preview(ctx, company_id=company_id, period=period)
    for w in preview.warnings:
        print("warning:", w.message)
    committed = container.salary_service.commit(preview.salaries)
    print(f"saved={len(committed.saved)} exists={list(preview.exists) + list(committed.exists)}")

    result = container.payment_service.generate_payment(ctx, company_id=company_id, period=period)
    print(result.to_dict())


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2])
