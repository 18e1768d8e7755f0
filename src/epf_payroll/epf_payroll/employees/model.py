from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.money import to_money
from ..core.constants import ALLOWED_DIVIDE_BY, DEFAULT_DIVIDE_BY, DEFAULT_PROBABILITIES, WEEKDAY_KEYS
from ..core.enums import CalendarName, DayCategory, OtMethod
from ..core.exceptions import ValidationError
from ..shifts.model import Shift


@dataclass(frozen=True)
class Probabilities:
    """Percentages (0-100) used only by the random OT method."""

    work_on_off: float = DEFAULT_PROBABILITIES["workOnOff"]
    work_on_holiday: float = DEFAULT_PROBABILITIES["workOnHoliday"]
    absent: float = DEFAULT_PROBABILITIES["absent"]
    late: float = DEFAULT_PROBABILITIES["late"]
    ot: float = DEFAULT_PROBABILITIES["ot"]

    def __post_init__(self):
        for name in ("work_on_off", "work_on_holiday", "absent", "late", "ot"):
            value = getattr(self, name)
            if value < 0 or value > 100:
                raise ValidationError(f"Probability {name} must be between 0 and 100")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Probabilities":
        data = {**DEFAULT_PROBABILITIES, **(data or {})}
        return cls(
            work_on_off=float(data["workOnOff"]),
            work_on_holiday=float(data["workOnHoliday"]),
            absent=float(data["absent"]),
            late=float(data["late"]),
            ot=float(data["ot"]),
        )


@dataclass(frozen=True)
class Overrides:
    """Which settings are employee specific instead of inherited from the company."""

    shifts: bool = False
    working_days: bool = False
    probabilities: bool = False
    payment_structure: bool = False
    calendar: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Overrides":
        data = data or {}
        return cls(
            shifts=bool(data.get("shifts", False)),
            working_days=bool(data.get("workingDays", False)),
            probabilities=bool(data.get("probabilities", False)),
            payment_structure=bool(data.get("paymentStructure", False)),
            calendar=bool(data.get("calendar", False)),
        )


def parse_working_days(data: Optional[Mapping[str, Any]]) -> Optional[dict[str, DayCategory]]:
    if not data:
        return None
    days = {}
    for key in WEEKDAY_KEYS:
        try:
            days[key] = DayCategory(data.get(key, DayCategory.OFF.value))
        except ValueError:
            raise ValidationError(f"workingDays.{key} must be full, half or off")
    return days


def parse_shifts(data) -> tuple[Shift, ...]:
    return tuple(Shift.from_dict(s) for s in (data or []))


@dataclass(frozen=True)
class Employee:
    """Domain entity: read-only roster record consumed by the engine."""

    employee_id: str
    company_id: str
    member_no: int
    name: str
    nic: str
    basic: Decimal
    divide_by: int = DEFAULT_DIVIDE_BY
    ot_method: OtMethod = OtMethod.RANDOM
    shifts: tuple[Shift, ...] = ()
    working_days: Optional[dict[str, DayCategory]] = None
    probabilities: Optional[Probabilities] = None
    payment_structure: Optional[dict] = None
    calendar: CalendarName = CalendarName.DEFAULT
    overrides: Overrides = field(default_factory=Overrides)
    active: bool = True

    def __post_init__(self):
        if self.divide_by not in ALLOWED_DIVIDE_BY:
            raise ValidationError(f"divideBy must be one of {ALLOWED_DIVIDE_BY}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Employee":
        probabilities = data.get("probabilities")
        return cls(
            employee_id=str(data["id"]),
            company_id=str(data["company"]),
            member_no=int(data["memberNo"]),
            name=str(data["name"]),
            nic=str(data.get("nic") or ""),
            basic=to_money(data["basic"]),
            divide_by=int(data.get("divideBy") or DEFAULT_DIVIDE_BY),
            ot_method=OtMethod(data.get("otMethod") or OtMethod.RANDOM.value),
            shifts=parse_shifts(data.get("shifts")),
            working_days=parse_working_days(data.get("workingDays")),
            probabilities=Probabilities.from_dict(probabilities) if probabilities else None,
            payment_structure=data.get("paymentStructure"),
            calendar=CalendarName(data.get("calendar") or CalendarName.DEFAULT.value),
            overrides=Overrides.from_dict(data.get("overrides")),
            active=bool(data.get("active", True)),
        )
