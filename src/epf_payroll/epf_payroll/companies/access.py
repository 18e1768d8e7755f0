from __future__ import annotations

import logging

from ..core.context import RequestContext
from ..core.exceptions import NotFoundError
from .model import Company
from .repository import CompanyRepository

logger = logging.getLogger(__name__)


def load_company(companies: CompanyRepository, ctx: RequestContext, company_id: str) -> Company:
    """Company visible to the caller.

    A company owned by someone else is reported exactly like a missing one.
    """
    company = companies.get_by_id(company_id)
    if company and not ctx.can_access(company.user_id):
        logger.warning("User %s denied access to company %s", ctx.user_id, company_id)
        company = None
    if not company:
        raise NotFoundError("Company not found")
    return company
