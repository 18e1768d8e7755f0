from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import Salary


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary totals)."""

    @abstractmethod
    def earnings_base(self, salary: Salary) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def epf_deduction(self, salary: Salary) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def final_salary(self, salary: Salary) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def recalculate(self, salary: Salary) -> Salary:
        """Re-derive the EPF deduction, then the final salary."""

        raise NotImplementedError
