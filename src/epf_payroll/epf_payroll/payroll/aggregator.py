from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.factory import HoursStrategyFactory
from ..attendance.model import AttendanceWarning, InOutEvent, to_hours
from ..attendance.pairing import pair_punches
from ..attendance.strategies.base import PayRates
from ..calendars.model import HolidayCalendar
from ..common.datetime_utils import period_dates, to_iso_z
from ..common.money import ZERO, money_sum, to_money
from ..core.enums import GenerationMode
from ..core.exceptions import MissingAttendanceError
from ..core.settings import EngineSettings
from ..employees.resolution import EffectiveEmployee
from ..shifts.resolver import DayContext, ShiftResolver
from .calculator.base import SalaryCalculator
from .model import AmountReason, Salary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateResult:
    salary: Salary
    warnings: tuple[AttendanceWarning, ...] = ()


class SalaryAggregator:
    """Fold one employee's period of attendance into a Salary.

    Modes:
    - GENERATE: from raw punches (or simulation) and the employee's current
      payment structure.
    - REGENERATE: like GENERATE, but keeps the existing salary's id, basic,
      payment structure snapshot, advance and remark.
    - UPDATE: revalues the existing (or caller edited) events in place and
      keeps the same manual fields as REGENERATE.

    OT and no-pay reasons are summaries of all events (hours and absent days).
    """

    def __init__(
        self,
        *,
        resolver: ShiftResolver,
        calculator: SalaryCalculator,
        settings: EngineSettings,
        strategies: Optional[HoursStrategyFactory] = None,
    ):
        self._resolver = resolver
        self._calculator = calculator
        self._settings = settings
        self._strategies = strategies or HoursStrategyFactory()

    def build(
        self,
        *,
        employee: EffectiveEmployee,
        company_id: str,
        period: str,
        calendar: HolidayCalendar,
        mode: GenerationMode = GenerationMode.GENERATE,
        punches: Optional[Sequence[datetime]] = None,
        events: Optional[Sequence[InOutEvent]] = None,
        existing: Optional[Salary] = None,
        rng: Optional[random.Random] = None,
    ) -> AggregateResult:
        if mode != GenerationMode.GENERATE and existing is None:
            raise ValueError(f"{mode.value} requires an existing salary")

        strategy = self._strategies.for_method(employee.ot_method)
        keep_manual = mode != GenerationMode.GENERATE
        basic = existing.basic if keep_manual else employee.basic
        rates = PayRates.of(basic=basic, divide_by=employee.divide_by, ot_multiplier=self._settings.ot_multiplier)
        days = {
            d: self._resolver.resolve(employee=employee, work_date=d, calendar=calendar)
            for d in period_dates(period)
        }
        warnings: list[AttendanceWarning] = []

        if mode == GenerationMode.UPDATE:
            source = events if events is not None else existing.in_out
            pairs = [(e.in_time, e.out_time, e.remark) for e in source]
            tracked = bool(pairs) or strategy.simulates
        elif strategy.simulates:
            if punches:
                warnings.append(
                    AttendanceWarning(
                        code="attendance_ignored",
                        message=f"Attendance of {employee.name} ignored: OT method is random",
                        identifier=employee.employee_id,
                    )
                )
            simulated = strategy.simulate_pairs(
                days=list(days.values()),
                probabilities=employee.probabilities,
                rng=rng or random.Random(),
            )
            pairs = [(i, o, "") for i, o in simulated]
            tracked = True
        else:
            pairing = pair_punches(punches or (), max_span_hours=self._settings.max_shift_span_hours)
            for punch in pairing.unpaired:
                warnings.append(
                    AttendanceWarning(
                        code="unpaired_punch",
                        message=f"Unpaired punch for {employee.name} at {to_iso_z(punch)}",
                        identifier=employee.employee_id,
                    )
                )
            pairs = [(i, o, "") for i, o in pairing.pairs]
            tracked = bool(punches)

        if strategy.requires_attendance and not pairs:
            raise MissingAttendanceError(employee.name)

        computed = []
        for in_time, out_time, remark in pairs:
            if in_time.date() not in days:
                logger.debug("Skipping %s event outside %s for %s", to_iso_z(in_time), period, employee.employee_id)
                continue
            day = self._resolver.resolve(employee=employee, work_date=in_time.date(), calendar=calendar, clock_in=in_time)
            computed.append(
                strategy.compute_event(in_time=in_time, out_time=out_time, day=day, rates=rates, remark=remark)
            )

        absent = self._absent_days(days, computed) if tracked else []
        absence_pay = money_sum(to_money(to_hours(d.expected_hours) * rates.hourly) for d in absent)

        ot_hours = sum((e.ot_hours for e in computed), Decimal("0.00"))
        short_hours = sum((e.no_pay_hours for e in computed), Decimal("0.00"))

        salary = Salary(
            salary_id=existing.salary_id if existing else None,
            employee_id=employee.employee_id,
            company_id=company_id,
            period=period,
            basic=to_money(basic),
            holiday_pay=money_sum(e.holiday_pay for e in computed),
            in_out=tuple(computed),
            ot=AmountReason(amount=money_sum(e.ot for e in computed), reason=_ot_reason(ot_hours)),
            no_pay=AmountReason(
                amount=to_money(money_sum(e.no_pay for e in computed) + absence_pay),
                reason=_no_pay_reason(len(absent), short_hours),
            ),
            payment_structure=existing.payment_structure if keep_manual else employee.payment_structure,
            advance_amount=existing.advance_amount if keep_manual else ZERO,
            remark=existing.remark if keep_manual else "",
        )
        return AggregateResult(salary=self._calculator.recalculate(salary), warnings=tuple(warnings))

    @staticmethod
    def _absent_days(days: dict[date, DayContext], events: Sequence[InOutEvent]) -> list[DayContext]:
        worked = {e.work_date for e in events}
        return [ctx for d, ctx in days.items() if ctx.expects_work and d not in worked]


def _ot_reason(ot_hours: Decimal) -> str:
    return f"{ot_hours}h overtime" if ot_hours else ""


def _no_pay_reason(absent_days: int, short_hours: Decimal) -> str:
    parts = []
    if absent_days:
        parts.append(f"{absent_days} absent day(s)")
    if short_hours:
        parts.append(f"{short_hours}h short")
    return ", ".join(parts)
