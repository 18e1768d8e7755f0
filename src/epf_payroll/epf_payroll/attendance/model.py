from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_z, to_iso_z
from ..common.money import ZERO, to_money
from ..core.enums import IdentifierType
from ..core.exceptions import ValidationError


def to_hours(value: Any) -> Decimal:
    return Decimal(str(round(float(value), 2))).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class InOutEvent:
    """One clock-in/clock-out pair and what it is worth."""

    in_time: datetime
    out_time: datetime
    working_hours: Decimal = Decimal("0.00")
    ot_hours: Decimal = Decimal("0.00")
    ot: Decimal = ZERO
    no_pay_hours: Decimal = Decimal("0.00")
    no_pay: Decimal = ZERO
    holiday: str = ""
    holiday_pay: Decimal = ZERO
    description: str = ""
    remark: str = ""

    def __post_init__(self):
        if self.out_time <= self.in_time:
            raise ValidationError(
                f"Out time must be after in time ({to_iso_z(self.in_time)} / {to_iso_z(self.out_time)})"
            )

    @property
    def work_date(self):
        return self.in_time.date()

    def to_dict(self) -> dict:
        return {
            "in": to_iso_z(self.in_time),
            "out": to_iso_z(self.out_time),
            "workingHours": float(self.working_hours),
            "otHours": float(self.ot_hours),
            "ot": str(self.ot),
            "noPayHours": float(self.no_pay_hours),
            "noPay": str(self.no_pay),
            "holiday": self.holiday,
            "holidayPay": str(self.holiday_pay),
            "description": self.description,
            "remark": self.remark,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InOutEvent":
        if not data.get("in") or not data.get("out"):
            raise ValidationError("In/Out event requires both 'in' and 'out'")
        return cls(
            in_time=parse_iso_z(str(data["in"])),
            out_time=parse_iso_z(str(data["out"])),
            working_hours=to_hours(data.get("workingHours") or 0),
            ot_hours=to_hours(data.get("otHours") or 0),
            ot=to_money(data.get("ot") or 0),
            no_pay_hours=to_hours(data.get("noPayHours") or 0),
            no_pay=to_money(data.get("noPay") or 0),
            holiday=str(data.get("holiday") or ""),
            holiday_pay=to_money(data.get("holidayPay") or 0),
            description=str(data.get("description") or ""),
            remark=str(data.get("remark") or ""),
        )


@dataclass(frozen=True)
class CsvEntry:
    line_no: int
    identifier: str
    timestamp: datetime
    identifier_type: IdentifierType

    def to_dict(self) -> dict:
        return {
            "line": self.line_no,
            "identifier": self.identifier,
            "timestamp": to_iso_z(self.timestamp),
            "type": self.identifier_type.value,
        }


@dataclass(frozen=True)
class AttendanceWarning:
    """Non-fatal finding surfaced for acknowledgment."""

    code: str
    message: str
    line_no: Optional[int] = None
    identifier: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"code": self.code, "message": self.message}
        if self.line_no is not None:
            data["line"] = self.line_no
        if self.identifier is not None:
            data["identifier"] = self.identifier
        return data


@dataclass(frozen=True)
class CsvParseResult:
    identifier_type: IdentifierType
    entries: tuple[CsvEntry, ...] = ()
    warnings: tuple[AttendanceWarning, ...] = ()
    # identifier -> employee id, for identifiers that map to an active employee
    resolved: Mapping[str, str] = field(default_factory=dict)

    def punches_by_employee(self) -> dict[str, list[datetime]]:
        punches: dict[str, list[datetime]] = {}
        for entry in self.entries:
            employee_id = self.resolved.get(entry.identifier)
            if employee_id is None:
                continue
            punches.setdefault(employee_id, []).append(entry.timestamp)
        for values in punches.values():
            values.sort()
        return punches
