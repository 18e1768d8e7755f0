from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import CalendarName
from .model import Holiday


class HolidayRepository(Protocol):
    def list_range(self, *, start: date, end: date, calendar: Optional[CalendarName] = None) -> Sequence[Holiday]:
        raise NotImplementedError
