from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from ...common.datetime_utils import hours_between
from ...common.money import ZERO, to_money
from ...employees.model import Probabilities
from ...shifts.resolver import DayContext
from ..model import InOutEvent, to_hours


@dataclass(frozen=True)
class PayRates:
    hourly: Decimal
    ot: Decimal

    @classmethod
    def of(cls, *, basic: Decimal, divide_by: int, ot_multiplier: Decimal) -> "PayRates":
        hourly = Decimal(basic) / Decimal(divide_by)
        return cls(hourly=hourly, ot=hourly * Decimal(ot_multiplier))


@dataclass(frozen=True)
class HoursBreakdown:
    working: float
    ot: float = 0.0
    no_pay: float = 0.0
    holiday: float = 0.0


def worked_hours(in_time: datetime, out_time: datetime, day: DayContext) -> float:
    """Clock delta minus the break that applies to the day, not below 0."""
    if day.expects_work:
        break_hours = day.break_hours
    else:
        break_hours = float(day.shift.break_hours)
    return max(hours_between(in_time, out_time) - break_hours, 0.0)


class HoursStrategy(ABC):
    """Strategy Pattern: how one in/out pair turns into hours and amounts."""

    # Generation fails for the employee when no attendance data exists.
    requires_attendance = False
    # Attendance is simulated instead of read from punches.
    simulates = False

    @abstractmethod
    def breakdown(self, *, in_time: datetime, out_time: datetime, day: DayContext) -> HoursBreakdown:
        raise NotImplementedError

    def simulate_pairs(
        self,
        *,
        days: Sequence[DayContext],
        probabilities: Probabilities,
        rng: random.Random,
    ) -> list[tuple[datetime, datetime]]:
        raise NotImplementedError(f"{type(self).__name__} does not simulate attendance")

    def compute_event(
        self,
        *,
        in_time: datetime,
        out_time: datetime,
        day: DayContext,
        rates: PayRates,
        remark: str = "",
    ) -> InOutEvent:
        hours = self.breakdown(in_time=in_time, out_time=out_time, day=day)
        ot_hours = to_hours(hours.ot)
        no_pay_hours = to_hours(hours.no_pay)
        holiday_hours = to_hours(hours.holiday)
        return InOutEvent(
            in_time=in_time,
            out_time=out_time,
            working_hours=to_hours(hours.working),
            ot_hours=ot_hours,
            ot=to_money(ot_hours * rates.ot) if ot_hours else ZERO,
            no_pay_hours=no_pay_hours,
            no_pay=to_money(no_pay_hours * rates.hourly) if no_pay_hours else ZERO,
            holiday=day.holiday_name if day.is_holiday and hours.working > 0 else "",
            holiday_pay=to_money(holiday_hours * rates.hourly) if holiday_hours else ZERO,
            description=describe(day, ot_hours, no_pay_hours),
            remark=remark,
        )


def describe(day: DayContext, ot_hours: Decimal, no_pay_hours: Decimal) -> str:
    parts = []
    if day.is_holiday:
        parts.append(day.holiday_name)
    elif not day.expects_work:
        parts.append("Off day")
    if no_pay_hours:
        parts.append(f"Short {no_pay_hours}h")
    if ot_hours:
        parts.append(f"OT {ot_hours}h")
    return "; ".join(parts)
