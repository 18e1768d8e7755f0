from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from ..common.money import ZERO, Amount, AmountRange, amount_to_json, money_sum, parse_amount, to_money
from ..core.constants import EPF_DEDUCTION_NAME


@dataclass(frozen=True)
class PaymentItem:
    """One named addition or deduction.

    ``amount`` is either a committed Decimal or a display-only AmountRange;
    only committed amounts take part in totals.
    """

    name: str
    amount: Amount
    affect_total_earnings: bool = False

    @property
    def committed(self) -> Optional[Decimal]:
        if isinstance(self.amount, AmountRange):
            return None
        return self.amount

    @property
    def is_epf(self) -> bool:
        return self.name == EPF_DEDUCTION_NAME

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "amount": amount_to_json(self.amount),
            "affectTotalEarnings": self.affect_total_earnings,
        }


def _committed_total(items: Iterable[PaymentItem], *, earnings_only: bool = False) -> Decimal:
    return money_sum(
        item.committed
        for item in items
        if item.committed is not None and (item.affect_total_earnings or not earnings_only)
    )


@dataclass(frozen=True)
class PaymentStructure:
    additions: tuple[PaymentItem, ...] = field(default_factory=tuple)
    deductions: tuple[PaymentItem, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], *, field_prefix: str = "paymentStructure") -> "PaymentStructure":
        data = data or {}
        additions = tuple(
            _parse_item(raw, f"{field_prefix}.additions[{raw.get('name', i)}].amount")
            for i, raw in enumerate(data.get("additions") or [])
        )
        deductions = []
        for i, raw in enumerate(data.get("deductions") or []):
            if raw.get("name") == EPF_DEDUCTION_NAME:
                # System computed; a blank stored value is not a missing field.
                stored = raw.get("amount")
                amount = to_money(stored) if stored not in (None, "") else ZERO
                deductions.append(PaymentItem(name=EPF_DEDUCTION_NAME, amount=amount))
                continue
            deductions.append(_parse_item(raw, f"{field_prefix}.deductions[{raw.get('name', i)}].amount"))
        return cls(additions=additions, deductions=tuple(deductions)).with_epf(_existing_epf(deductions))

    def to_dict(self) -> dict:
        return {
            "additions": [a.to_dict() for a in self.additions],
            "deductions": [d.to_dict() for d in self.deductions],
        }

    @property
    def epf_item(self) -> Optional[PaymentItem]:
        for item in self.deductions:
            if item.is_epf:
                return item
        return None

    @property
    def epf_amount(self) -> Decimal:
        item = self.epf_item
        return item.committed if item and item.committed is not None else ZERO

    def with_epf(self, amount: Decimal) -> "PaymentStructure":
        """Exactly one EPF deduction, carrying ``amount``."""
        epf = PaymentItem(name=EPF_DEDUCTION_NAME, amount=to_money(amount), affect_total_earnings=False)
        others = tuple(d for d in self.deductions if not d.is_epf)
        return replace(self, deductions=others + (epf,))

    def total_additions(self) -> Decimal:
        return _committed_total(self.additions)

    def total_deductions(self) -> Decimal:
        return _committed_total(self.deductions)

    def earnings_additions(self) -> Decimal:
        return _committed_total(self.additions, earnings_only=True)

    def earnings_deductions(self) -> Decimal:
        return _committed_total((d for d in self.deductions if not d.is_epf), earnings_only=True)


def _parse_item(raw: Mapping[str, Any], field: str) -> PaymentItem:
    return PaymentItem(
        name=str(raw.get("name") or ""),
        amount=parse_amount(raw.get("amount"), field=field),
        affect_total_earnings=bool(raw.get("affectTotalEarnings", False)),
    )


def _existing_epf(deductions: list[PaymentItem]) -> Decimal:
    for item in deductions:
        if item.is_epf and item.committed is not None:
            return item.committed
    return ZERO
