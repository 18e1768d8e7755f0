from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..attendance.model import InOutEvent
from ..common.money import ZERO, to_money
from ..common.validators import require_period
from ..core.exceptions import MissingFieldError
from .structure import PaymentStructure


@dataclass(frozen=True)
class AmountReason:
    amount: Decimal = ZERO
    reason: str = ""

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "reason": self.reason}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], *, field: str) -> "AmountReason":
        if data is None or data.get("amount") in (None, ""):
            raise MissingFieldError(f"{field}.amount")
        return cls(amount=to_money(data["amount"]), reason=str(data.get("reason") or ""))


@dataclass(frozen=True)
class Salary:
    """One Salary per (employee, period).

    ``payment_structure`` is a snapshot taken at generation time, never a
    live reference to the employee or company structure.
    """

    employee_id: str
    company_id: str
    period: str
    basic: Decimal
    holiday_pay: Decimal = ZERO
    in_out: tuple[InOutEvent, ...] = ()
    ot: AmountReason = field(default_factory=AmountReason)
    no_pay: AmountReason = field(default_factory=AmountReason)
    payment_structure: PaymentStructure = field(default_factory=PaymentStructure)
    advance_amount: Decimal = ZERO
    final_salary: Decimal = ZERO
    remark: str = ""
    salary_id: Optional[str] = None

    @property
    def epf_deduction(self) -> Decimal:
        return self.payment_structure.epf_amount

    def to_dict(self) -> dict:
        return {
            "id": self.salary_id,
            "employee": self.employee_id,
            "company": self.company_id,
            "period": self.period,
            "basic": str(self.basic),
            "holidayPay": str(self.holiday_pay),
            "inOut": [e.to_dict() for e in self.in_out],
            "ot": self.ot.to_dict(),
            "noPay": self.no_pay.to_dict(),
            "paymentStructure": self.payment_structure.to_dict(),
            "advanceAmount": str(self.advance_amount),
            "finalSalary": str(self.final_salary),
            "remark": self.remark,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Salary":
        for key in ("employee", "company", "period"):
            if not data.get(key):
                raise MissingFieldError(key)
        if data.get("basic") in (None, ""):
            raise MissingFieldError("basic")
        return cls(
            salary_id=str(data["id"]) if data.get("id") else None,
            employee_id=str(data["employee"]),
            company_id=str(data["company"]),
            period=require_period(str(data["period"])),
            basic=to_money(data["basic"]),
            holiday_pay=to_money(data.get("holidayPay") or 0),
            in_out=tuple(InOutEvent.from_dict(e) for e in (data.get("inOut") or [])),
            ot=AmountReason.from_dict(data.get("ot") or {"amount": 0}, field="ot"),
            no_pay=AmountReason.from_dict(data.get("noPay") or {"amount": 0}, field="noPay"),
            payment_structure=PaymentStructure.from_dict(data.get("paymentStructure")),
            advance_amount=to_money(data.get("advanceAmount") or 0),
            final_salary=to_money(data.get("finalSalary") or 0),
            remark=str(data.get("remark") or ""),
        )
