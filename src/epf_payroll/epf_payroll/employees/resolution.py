from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..companies.model import Company
from ..core.constants import DEFAULT_SHIFT, DEFAULT_WORKING_DAYS
from ..core.enums import CalendarName, DayCategory, OtMethod
from ..payroll.structure import PaymentStructure
from ..shifts.model import Shift
from .model import Employee, Probabilities, parse_working_days


@dataclass(frozen=True)
class EffectiveEmployee:
    """Employee with every inheritable setting resolved against the company."""

    employee: Employee
    shifts: tuple[Shift, ...]
    working_days: dict[str, DayCategory]
    probabilities: Probabilities
    payment_structure: PaymentStructure
    calendar: CalendarName

    @property
    def employee_id(self) -> str:
        return self.employee.employee_id

    @property
    def name(self) -> str:
        return self.employee.name

    @property
    def basic(self) -> Decimal:
        return self.employee.basic

    @property
    def divide_by(self) -> int:
        return self.employee.divide_by

    @property
    def ot_method(self) -> OtMethod:
        return self.employee.ot_method


def resolve_employee(employee: Employee, company: Company) -> EffectiveEmployee:
    """Apply override flags: employee value when flagged, else the company's.

    Raises MissingFieldError/ValidationError when the resolved payment
    structure has an unusable amount.
    """
    ov = employee.overrides

    shifts = employee.shifts if ov.shifts else company.shifts
    working_days = employee.working_days if ov.working_days else company.working_days
    probabilities = employee.probabilities if ov.probabilities else company.probabilities
    structure = employee.payment_structure if ov.payment_structure else company.payment_structure
    calendar = employee.calendar if ov.calendar else company.calendar

    return EffectiveEmployee(
        employee=employee,
        shifts=tuple(shifts) or (Shift.from_dict(DEFAULT_SHIFT),),
        working_days=working_days or parse_working_days(DEFAULT_WORKING_DAYS),
        probabilities=probabilities or Probabilities(),
        payment_structure=PaymentStructure.from_dict(structure),
        calendar=calendar,
    )
