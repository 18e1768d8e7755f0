from __future__ import annotations

from datetime import date, datetime

from src.epf_payroll.epf_payroll.calendars.model import Holiday, HolidayCalendar
from src.epf_payroll.epf_payroll.core.enums import CalendarName, DayCategory, ShiftSelection
from src.epf_payroll.epf_payroll.employees.model import Overrides
from src.epf_payroll.epf_payroll.employees.resolution import resolve_employee
from src.epf_payroll.epf_payroll.shifts.model import Shift
from src.epf_payroll.epf_payroll.shifts.resolver import ShiftResolver

from tests.fakes import make_company, make_employee

POYA = Holiday(holiday_date=date(2024, 3, 25), calendar=CalendarName.DEFAULT, summary="Medin Full Moon Poya Day", public=True)
CALENDAR = HolidayCalendar.of(CalendarName.DEFAULT, [POYA])


def effective(**kwargs):
    return resolve_employee(make_employee(**kwargs), make_company())


def test_full_day_uses_company_default_shift():
    day = ShiftResolver().resolve(employee=effective(), work_date=date(2024, 3, 4), calendar=CALENDAR)

    assert day.day_category == DayCategory.FULL
    assert day.expected_start == datetime(2024, 3, 4, 8)
    assert day.expected_end == datetime(2024, 3, 4, 17)
    assert day.break_hours == 1.0
    assert day.expected_hours == 8.0
    assert not day.is_holiday


def test_half_day_expects_first_half_of_paid_hours():
    day = ShiftResolver().resolve(employee=effective(), work_date=date(2024, 3, 9), calendar=CALENDAR)

    assert day.day_category == DayCategory.HALF
    assert day.expected_end == datetime(2024, 3, 9, 12)
    assert day.expected_hours == 4.0


def test_off_day_and_holiday_expect_no_work():
    resolver = ShiftResolver()
    sunday = resolver.resolve(employee=effective(), work_date=date(2024, 3, 10), calendar=CALENDAR)
    poya = resolver.resolve(employee=effective(), work_date=date(2024, 3, 25), calendar=CALENDAR)

    assert not sunday.expects_work and sunday.day_category == DayCategory.OFF
    assert poya.is_holiday and not poya.expects_work
    assert poya.holiday_name == "Medin Full Moon Poya Day"
    # The shift window stays available for overtime.
    assert poya.shift_end == datetime(2024, 3, 25, 17)


def test_other_calendar_ignores_default_holidays():
    other = HolidayCalendar.of(CalendarName.OTHER, [POYA])
    day = ShiftResolver().resolve(employee=effective(), work_date=date(2024, 3, 25), calendar=other)
    assert not day.is_holiday


def test_nearest_start_picks_the_closest_shift():
    shifts = (Shift.from_dict({"start": "06:00", "end": "14:00"}), Shift.from_dict({"start": "14:00", "end": "22:00"}))
    employee = effective(shifts=shifts, overrides=Overrides(shifts=True))

    day = ShiftResolver(ShiftSelection.NEAREST_START).resolve(
        employee=employee, work_date=date(2024, 3, 4), calendar=CALENDAR, clock_in=datetime(2024, 3, 4, 13, 50)
    )
    first = ShiftResolver(ShiftSelection.FIRST).resolve(
        employee=employee, work_date=date(2024, 3, 4), calendar=CALENDAR, clock_in=datetime(2024, 3, 4, 13, 50)
    )

    assert day.expected_start == datetime(2024, 3, 4, 14)
    assert first.expected_start == datetime(2024, 3, 4, 6)


def test_overnight_shift_ends_next_day():
    shifts = (Shift.from_dict({"start": "22:00", "end": "06:00", "break": 0.5}),)
    employee = effective(shifts=shifts, overrides=Overrides(shifts=True))

    day = ShiftResolver().resolve(employee=employee, work_date=date(2024, 3, 4), calendar=CALENDAR)

    assert day.expected_end == datetime(2024, 3, 5, 6)
    assert day.expected_hours == 7.5
