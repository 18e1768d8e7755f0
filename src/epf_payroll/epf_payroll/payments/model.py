from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.money import ZERO, to_money


@dataclass(frozen=True)
class Payment:
    """One EPF/ETF Payment per (company, period)."""

    company_id: str
    period: str
    epf_amount: Decimal = ZERO
    epf_surcharges: Decimal = ZERO
    epf_reference_no: str = ""
    epf_payment_method: str = ""
    epf_cheque_no: str = ""
    epf_pay_day: str = ""
    etf_amount: Decimal = ZERO
    etf_surcharges: Decimal = ZERO
    etf_payment_method: str = ""
    etf_cheque_no: str = ""
    etf_pay_day: str = ""
    remark: str = ""
    payment_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "company": self.company_id,
            "period": self.period,
            "epfAmount": str(self.epf_amount),
            "epfSurcharges": str(self.epf_surcharges),
            "epfReferenceNo": self.epf_reference_no,
            "epfPaymentMethod": self.epf_payment_method,
            "epfChequeNo": self.epf_cheque_no,
            "epfPayDay": self.epf_pay_day,
            "etfAmount": str(self.etf_amount),
            "etfSurcharges": str(self.etf_surcharges),
            "etfPaymentMethod": self.etf_payment_method,
            "etfChequeNo": self.etf_cheque_no,
            "etfPayDay": self.etf_pay_day,
            "remark": self.remark,
        }

    @classmethod
    def from_row(cls, r: Mapping[str, Any]) -> "Payment":
        return cls(
            payment_id=str(r["payment_id"]),
            company_id=str(r["company_id"]),
            period=str(r["period"]),
            epf_amount=to_money(r["epf_amount"]),
            epf_surcharges=to_money(r.get("epf_surcharges") or 0),
            epf_reference_no=r.get("epf_reference_no") or "",
            epf_payment_method=r.get("epf_payment_method") or "",
            epf_cheque_no=r.get("epf_cheque_no") or "",
            epf_pay_day=r.get("epf_pay_day") or "",
            etf_amount=to_money(r["etf_amount"]),
            etf_surcharges=to_money(r.get("etf_surcharges") or 0),
            etf_payment_method=r.get("etf_payment_method") or "",
            etf_cheque_no=r.get("etf_cheque_no") or "",
            etf_pay_day=r.get("etf_pay_day") or "",
            remark=r.get("remark") or "",
        )
