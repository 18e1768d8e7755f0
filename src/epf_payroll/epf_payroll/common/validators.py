from __future__ import annotations

import re

from ..core.exceptions import ValidationError
from .datetime_utils import parse_period

_EMPLOYER_NO = re.compile(r"^[A-Z]/\d{5}$", re.IGNORECASE)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_period(value: str) -> str:
    value = require_non_empty(value, "Period")
    parse_period(value)
    return value


def require_employer_no(value: str) -> str:
    value = require_non_empty(value, "Employer Number")
    if not _EMPLOYER_NO.match(value):
        raise ValidationError("Employer Number must match the pattern A/12345 or a/12345")
    return value
