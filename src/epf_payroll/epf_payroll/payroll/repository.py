from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Salary


class SalaryRepository(Protocol):
    def get_by_id(self, salary_id: str) -> Optional[Salary]:
        raise NotImplementedError

    def get_for_employee_period(self, employee_id: str, period: str) -> Optional[Salary]:
        raise NotImplementedError

    def list_for_employees(self, employee_ids: Iterable[str], period: str) -> Sequence[Salary]:
        raise NotImplementedError

    def list_for_company_period(self, company_id: str, period: str) -> Sequence[Salary]:
        raise NotImplementedError

    def insert_if_absent(self, salary: Salary) -> Optional[str]:
        """Atomic compare-and-insert on (employee, period).

        Returns the new salary id, or None when a salary already exists.
        """

        raise NotImplementedError

    def update(self, salary: Salary) -> bool:
        raise NotImplementedError

    def delete(self, salary_id: str) -> bool:
        raise NotImplementedError
