# Overview: Order total calculator (pure; no database access).

"""
Order totals

    subtotal = sum(quantity * unit_price)
    tax      = subtotal * rate
    total    = subtotal + tax

All arithmetic is exact Decimal. Nothing is rounded here; rounding to cents
is a display concern (see bizops.money.round_for_display).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from flask import current_app, has_app_context

from ..money import MoneyInput, round_for_display, to_decimal

DEFAULT_TAX_RATE = Decimal("0.10")
ZERO = Decimal("0")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def display(self) -> dict[str, Decimal]:
        return {
            "subtotal": round_for_display(self.subtotal),
            "tax": round_for_display(self.tax),
            "total": round_for_display(self.total),
        }


def _field(item: Any, name: str):
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)


def normalize_rate(rate: MoneyInput) -> Decimal:
    value = to_decimal(rate)
    if value < 0:
        raise ValueError("tax rate cannot be negative")
    return value


def default_tax_rate() -> Decimal:
    """Configured order tax rate; the single source of truth for every order path."""
    if has_app_context():
        return normalize_rate(current_app.config.get("ORDER_TAX_RATE", DEFAULT_TAX_RATE))
    return DEFAULT_TAX_RATE


def line_total(quantity: int, unit_price: MoneyInput) -> Decimal:
    return Decimal(quantity) * to_decimal(unit_price)


def compute_totals(items: Iterable[Any], rate: MoneyInput) -> OrderTotals:
    """
    Compute subtotal, tax and total for `items`.

    Items may be mappings or objects exposing `quantity` and `unit_price`.
    An empty iterable yields all-zero totals; rejecting empty orders is the
    processor's job.
    """
    tax_rate = normalize_rate(rate)

    subtotal = ZERO
    for item in items:
        subtotal += line_total(_field(item, "quantity"), _field(item, "unit_price"))

    tax = subtotal * tax_rate
    return OrderTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)
