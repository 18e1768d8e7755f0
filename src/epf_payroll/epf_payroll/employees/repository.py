from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_company(self, company_id: str, *, active_only: bool = True) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_ids(self, company_id: str, employee_ids: Iterable[str]) -> Sequence[Employee]:
        """Employees of the company among ``employee_ids`` (active or not)."""

        raise NotImplementedError
