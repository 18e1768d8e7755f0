from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..core.constants import CSV_TIMESTAMP_FORMAT, PERIOD_FORMAT, PRIOR_MONTH_CUTOFF_DAY, WEEKDAY_KEYS
from ..core.exceptions import ValidationError

_PERIOD = re.compile(r"\d{4}-\d{2}")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_period(period: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month); the month must have two digits."""
    if not _PERIOD.fullmatch(period or ""):
        raise ValidationError("Period must be in the format YYYY-MM")
    try:
        parsed = datetime.strptime(period, PERIOD_FORMAT)
    except ValueError:
        raise ValidationError("Period must be in the format YYYY-MM")
    return parsed.year, parsed.month


def period_bounds(period: str) -> tuple[date, date]:
    """First and last calendar day of the period."""
    year, month = parse_period(period)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def period_dates(period: str) -> Iterator[date]:
    start, end = period_bounds(period)
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def prior_month_cutoff(period: str) -> datetime:
    """Midnight of the 15th of the month before the period."""
    start, _ = period_bounds(period)
    previous = start - timedelta(days=1)
    return datetime(previous.year, previous.month, PRIOR_MONTH_CUTOFF_DAY)


def period_end_moment(period: str) -> datetime:
    _, end = period_bounds(period)
    return datetime.combine(end, time(23, 59, 59))


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, CSV_TIMESTAMP_FORMAT)


def to_iso_z(value: datetime) -> str:
    """Persisted events carry a trailing ``Z``."""
    return value.strftime(CSV_TIMESTAMP_FORMAT) + "Z"


def parse_iso_z(value: str) -> datetime:
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1]
    if "." in text:
        text = text.split(".", 1)[0]
    try:
        return parse_timestamp(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def weekday_key(day: date) -> str:
    return WEEKDAY_KEYS[day.weekday()]


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
