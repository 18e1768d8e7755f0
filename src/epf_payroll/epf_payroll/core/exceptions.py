from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every domain error carries a ``kind`` so callers can render it without
    parsing the message.
    """

    kind = "domain"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"


class CsvFormatError(ValidationError):
    """Malformed In/Out CSV line (1-based ``line_no``)."""

    def __init__(self, line_no: int, reason: str):
        super().__init__(f"Line {line_no}: {reason}")
        self.line_no = line_no
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["line"] = self.line_no
        return data


class NotFoundError(DomainError):
    kind = "not_found"


class ConflictError(DomainError):
    """Raised only where a conflict cannot be reported as data."""

    kind = "conflict"


class NotPurchasedError(DomainError):
    """The period has not been purchased for the company."""

    kind = "not_purchased"

    def __init__(self, period: str, status: str):
        super().__init__(f"Month not Purchased for {period}. Purchase is {status}")
        self.period = period
        self.status = status


class MissingAttendanceError(DomainError):
    kind = "missing_data"

    def __init__(self, employee_name: str):
        super().__init__(f"InOut required for calculated OT: {employee_name}")
        self.employee_name = employee_name


class MissingFieldError(DomainError):
    """A financial input is missing; the field is flagged instead of defaulted."""

    kind = "missing_data"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required")
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class ReferenceLookupError(DomainError):
    kind = "lookup"


class GenerationTimeoutError(DomainError):
    kind = "timeout"
