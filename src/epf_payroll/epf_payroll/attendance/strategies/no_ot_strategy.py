from __future__ import annotations

from datetime import datetime

from ...shifts.resolver import DayContext
from .base import HoursBreakdown, HoursStrategy, worked_hours


class NoOtStrategy(HoursStrategy):
    """No overtime; shortfall against the expected hours is no-pay."""

    def breakdown(self, *, in_time: datetime, out_time: datetime, day: DayContext) -> HoursBreakdown:
        working = worked_hours(in_time, out_time, day)
        if day.is_holiday:
            return HoursBreakdown(working=working, holiday=working)
        if not day.expects_work:
            return HoursBreakdown(working=working)
        return HoursBreakdown(working=working, no_pay=max(day.expected_hours - working, 0.0))
