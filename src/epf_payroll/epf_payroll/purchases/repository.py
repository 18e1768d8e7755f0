from __future__ import annotations

from typing import Optional, Protocol


class PurchaseRepository(Protocol):
    def get_status(self, company_id: str, period: str) -> Optional[str]:
        """Approval status of the company's purchase for the period, None if never purchased."""

        raise NotImplementedError
