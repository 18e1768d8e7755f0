from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for the entitlement bypass."""

    ADMIN = "admin"
    USER = "user"


class OtMethod(str, Enum):
    """How overtime and no-pay are derived for an employee."""

    NO_OT = "noOt"
    RANDOM = "random"
    CALC = "calc"


class DayCategory(str, Enum):
    FULL = "full"
    HALF = "half"
    OFF = "off"


class CalendarName(str, Enum):
    DEFAULT = "default"
    OTHER = "other"


class IdentifierType(str, Enum):
    """Which column the In/Out CSV identifies employees by."""

    EMPLOYEE_ID = "employeeId"
    MEMBER_NO = "memberNo"


class PurchaseStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    NONE = "none"


class CompanyMode(str, Enum):
    SELF = "self"
    VISIT = "visit"
    AIDED = "aided"


class ShiftSelection(str, Enum):
    """Rule used when an employee has more than one shift."""

    NEAREST_START = "nearest_start"
    FIRST = "first"


class GenerationMode(str, Enum):
    GENERATE = "generate"
    UPDATE = "update"
    REGENERATE = "regenerate"


class StepStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"
