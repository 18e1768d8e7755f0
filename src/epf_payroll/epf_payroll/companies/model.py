from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import CalendarName, CompanyMode, DayCategory
from ..employees.model import Probabilities, parse_shifts, parse_working_days
from ..shifts.model import Shift


@dataclass(frozen=True)
class Company:
    """Company defaults inherited by employees without overrides."""

    company_id: str
    name: str
    employer_no: str
    user_id: Optional[str] = None
    payment_method: str = ""
    mode: CompanyMode = CompanyMode.SELF
    shifts: tuple[Shift, ...] = ()
    working_days: Optional[dict[str, DayCategory]] = None
    probabilities: Optional[Probabilities] = None
    payment_structure: Optional[dict] = None
    calendar: CalendarName = CalendarName.DEFAULT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Company":
        probabilities = data.get("probabilities")
        return cls(
            company_id=str(data["id"]),
            name=str(data["name"]),
            employer_no=str(data.get("employerNo") or ""),
            user_id=str(data["user"]) if data.get("user") else None,
            payment_method=str(data.get("paymentMethod") or ""),
            mode=CompanyMode(data.get("mode") or CompanyMode.SELF.value),
            shifts=parse_shifts(data.get("shifts")),
            working_days=parse_working_days(data.get("workingDays")),
            probabilities=Probabilities.from_dict(probabilities) if probabilities else None,
            payment_structure=data.get("paymentStructure"),
            calendar=CalendarName(data.get("calendar") or CalendarName.DEFAULT.value),
        )
