from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Union

from ..core.exceptions import MissingFieldError, ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Quantize to cents, half-up."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return to_money(sum(values, ZERO))


@dataclass(frozen=True)
class AmountRange:
    """Display-only ``min-max`` amount; never part of a sum."""

    minimum: Decimal
    maximum: Decimal

    def __str__(self) -> str:
        return f"{_plain(self.minimum)}-{_plain(self.maximum)}"


Amount = Union[Decimal, AmountRange]


def _plain(value: Decimal) -> str:
    text = format(value.normalize(), "f")
    return text


def parse_amount(raw: Any, *, field: str) -> Amount:
    """Parse a stored payment-structure amount.

    Plain numbers become a committed ``Decimal``; ``"min-max"`` becomes an
    ``AmountRange``. A blank amount is flagged, never defaulted.
    """
    if isinstance(raw, AmountRange):
        return raw
    if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
        return to_money(raw)
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise MissingFieldError(field)
    low, sep, high = text.partition("-")
    if sep and low.strip():
        minimum, maximum = to_money(low.strip()), to_money(high.strip())
        if minimum > maximum:
            raise ValidationError(f"{field}: range minimum exceeds maximum")
        return AmountRange(minimum=minimum, maximum=maximum)
    return to_money(text)


def amount_to_json(amount: Amount) -> str:
    if isinstance(amount, AmountRange):
        return str(amount)
    return str(to_money(amount))
