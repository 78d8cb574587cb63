from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

CENT = Decimal("0.01")

MoneyInput = Union[Decimal, str, int, float]


def to_decimal(value: MoneyInput) -> Decimal:
    """
    Coerce a money-like value to Decimal without picking up float noise.

    Floats go through str() so 79.99 stays Decimal("79.99").
    """
    if isinstance(value, bool):
        raise ValueError("invalid amount")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"invalid amount: {value!r}")
    else:
        raise ValueError(f"invalid amount: {value!r}")

    if not result.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    return result


def round_for_display(amount: Optional[Decimal]) -> Optional[Decimal]:
    """Round half-up to cents. Display only; never feed back into totals."""
    if amount is None:
        return None
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money_str(amount: Optional[Decimal]) -> Optional[str]:
    """Exact string form for JSON payloads (trailing zeros trimmed past cents)."""
    if amount is None:
        return None
    if amount == amount.quantize(CENT):
        return str(amount.quantize(CENT))
    return str(amount.normalize())


def to_display_str(amount: Optional[Decimal]) -> Optional[str]:
    if amount is None:
        return None
    return str(round_for_display(amount))
