from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import hours_between
from ...shifts.resolver import DayContext
from .base import HoursBreakdown, HoursStrategy, worked_hours


class CalcStrategy(HoursStrategy):
    """Compare actual in/out against the expected window.

    Working day: time past the expected end is OT, regular hours short of the
    expected hours are no-pay. Holiday: hours inside the shift are holiday pay,
    hours past the shift end are OT. Off day: every worked hour is OT.
    """

    requires_attendance = True

    def breakdown(self, *, in_time: datetime, out_time: datetime, day: DayContext) -> HoursBreakdown:
        working = worked_hours(in_time, out_time, day)

        if day.is_holiday:
            ot = min(max(hours_between(day.shift_end, out_time), 0.0), working)
            return HoursBreakdown(working=working, ot=ot, holiday=working - ot)

        if not day.expects_work:
            return HoursBreakdown(working=working, ot=working)

        ot = min(max(hours_between(day.expected_end, out_time), 0.0), working)
        regular = working - ot
        return HoursBreakdown(working=working, ot=ot, no_pay=max(day.expected_hours - regular, 0.0))
