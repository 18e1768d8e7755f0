from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..core.enums import CalendarName


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    calendar: CalendarName
    summary: str = ""
    public: bool = False
    mercantile: bool = False
    bank: bool = False

    @property
    def categories(self) -> list[str]:
        names = []
        if self.public:
            names.append("public")
        if self.mercantile:
            names.append("mercantile")
        if self.bank:
            names.append("bank")
        return names


@dataclass(frozen=True)
class HolidayCalendar:
    """Date lookup over one named holiday set, preloaded for a period."""

    name: CalendarName
    holidays: dict[date, Holiday] = field(default_factory=dict)

    @classmethod
    def of(cls, name: CalendarName, holidays: Iterable[Holiday]) -> "HolidayCalendar":
        return cls(name=name, holidays={h.holiday_date: h for h in holidays if h.calendar == name})

    def holiday_on(self, day: date) -> Optional[Holiday]:
        return self.holidays.get(day)
