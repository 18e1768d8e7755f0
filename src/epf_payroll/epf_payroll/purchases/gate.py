from __future__ import annotations

import logging

from ..companies.model import Company
from ..core.context import RequestContext
from ..core.enums import CompanyMode, PurchaseStatus
from ..core.exceptions import NotPurchasedError
from .repository import PurchaseRepository

logger = logging.getLogger(__name__)

_ADMIN_BYPASS_MODES = (CompanyMode.VISIT, CompanyMode.AIDED)


class EntitlementGate:
    """Generation is allowed only for approved (company, period) purchases.

    Admins skip the check for companies they visit or aid.
    """

    def __init__(self, purchases: PurchaseRepository):
        self._purchases = purchases

    def check(self, ctx: RequestContext, company: Company, period: str) -> None:
        if ctx.is_admin and company.mode in _ADMIN_BYPASS_MODES:
            logger.info("Admin %s bypassed purchase check for %s %s", ctx.user_id, company.company_id, period)
            return
        status = self._purchases.get_status(company.company_id, period) or PurchaseStatus.NONE.value
        if status != PurchaseStatus.APPROVED.value:
            raise NotPurchasedError(period, status)
