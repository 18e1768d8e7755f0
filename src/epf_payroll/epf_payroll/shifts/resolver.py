from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..calendars.model import HolidayCalendar
from ..common.datetime_utils import hours_between, weekday_key
from ..core.enums import DayCategory, ShiftSelection
from ..employees.resolution import EffectiveEmployee
from .model import Shift


@dataclass(frozen=True)
class DayContext:
    """Expected work for one employee on one date.

    ``expected_start``/``expected_end`` are None when no work is expected
    (off day or holiday); the shift window is still available for overtime.
    """

    work_date: date
    day_category: DayCategory
    is_holiday: bool
    holiday_name: str
    shift: Shift
    shift_start: datetime
    shift_end: datetime
    expected_start: Optional[datetime]
    expected_end: Optional[datetime]
    break_hours: float

    @property
    def expects_work(self) -> bool:
        return self.expected_start is not None

    @property
    def expected_hours(self) -> float:
        if not self.expects_work:
            return 0.0
        return max(hours_between(self.expected_start, self.expected_end) - self.break_hours, 0.0)


class ShiftResolver:
    """Resolve shift window, holiday status and day category.

    Pure function of (employee config, calendar, date); safe to call per event.
    With several shifts, ``NEAREST_START`` picks the shift whose start is
    closest to the clock-in time and ``FIRST`` always takes the first one.
    Without a clock-in time the first shift is used.
    """

    def __init__(self, selection: ShiftSelection = ShiftSelection.NEAREST_START):
        self._selection = selection

    def select_shift(self, shifts: Sequence[Shift], work_date: date, clock_in: Optional[datetime]) -> Shift:
        if len(shifts) == 1 or clock_in is None or self._selection == ShiftSelection.FIRST:
            return shifts[0]
        return min(
            shifts,
            key=lambda s: abs((datetime.combine(work_date, s.start_time) - clock_in).total_seconds()),
        )

    def resolve(
        self,
        *,
        employee: EffectiveEmployee,
        work_date: date,
        calendar: HolidayCalendar,
        clock_in: Optional[datetime] = None,
    ) -> DayContext:
        category = employee.working_days.get(weekday_key(work_date), DayCategory.OFF)
        holiday = calendar.holiday_on(work_date)
        shift = self.select_shift(employee.shifts, work_date, clock_in)
        shift_start, shift_end = shift.window_on(work_date)

        expected_start: Optional[datetime] = None
        expected_end: Optional[datetime] = None
        break_hours = 0.0
        if holiday is None and category == DayCategory.FULL:
            expected_start, expected_end = shift_start, shift_end
            break_hours = float(shift.break_hours)
        elif holiday is None and category == DayCategory.HALF:
            # Half day: first half of the paid hours, no break.
            paid = max(hours_between(shift_start, shift_end) - float(shift.break_hours), 0.0)
            expected_start = shift_start
            expected_end = shift_start + timedelta(hours=paid / 2)

        return DayContext(
            work_date=work_date,
            day_category=category,
            is_holiday=holiday is not None,
            holiday_name=(holiday.summary or "Holiday") if holiday else "",
            shift=shift,
            shift_start=shift_start,
            shift_end=shift_end,
            expected_start=expected_start,
            expected_end=expected_end,
            break_hours=break_hours,
        )
