from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Shift:
    """Domain entity: a work window with an unpaid break (hours)."""

    start_time: time
    end_time: time
    break_hours: float = 0
    shift_name: str = ""

    def __post_init__(self):
        if self.break_hours < 0:
            raise ValidationError("Shift break cannot be negative")

    @property
    def is_overnight(self) -> bool:
        return self.end_time <= self.start_time

    def window_on(self, work_date: date) -> tuple[datetime, datetime]:
        start = datetime.combine(work_date, self.start_time)
        end = datetime.combine(work_date, self.end_time)
        if self.is_overnight:
            end += timedelta(days=1)
        return start, end

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Shift":
        return cls(
            start_time=parse_hhmm(str(data["start"])),
            end_time=parse_hhmm(str(data["end"])),
            break_hours=float(data.get("break") or 0),
            shift_name=str(data.get("name") or ""),
        )

    def to_dict(self) -> dict:
        data = {
            "start": self.start_time.strftime("%H:%M"),
            "end": self.end_time.strftime("%H:%M"),
            "break": self.break_hours,
        }
        if self.shift_name:
            data["name"] = self.shift_name
        return data
