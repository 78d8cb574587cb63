# Overview: Shared input normalization and reference checks for order processors.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..extensions import db
from ..models import Counterparty, CounterpartyRole, Product
from ..money import CENT, MoneyInput, to_decimal
from ..time_utils import normalize_datetime
from .concurrency import lock_for_update
from .errors import ValidationError
from .pricing_service import default_tax_rate, normalize_rate


@dataclass(frozen=True)
class LineItemInput:
    """Caller intent for one order line. `unit_price=None` snapshots the product price."""

    product_id: int
    quantity: int
    unit_price: Decimal | None = None


@dataclass(frozen=True)
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal


def _coerce_item(raw: Any, index: int) -> LineItemInput:
    if isinstance(raw, LineItemInput):
        item = raw
    elif isinstance(raw, Mapping):
        if "product_id" not in raw:
            raise ValidationError(f"Line {index + 1}: product_id required", details={"line": index + 1})
        item = LineItemInput(
            product_id=raw.get("product_id"),
            quantity=raw.get("quantity"),
            unit_price=raw.get("unit_price"),
        )
    else:
        raise ValidationError(f"Line {index + 1}: unsupported item", details={"line": index + 1})

    if not isinstance(item.product_id, int) or isinstance(item.product_id, bool):
        raise ValidationError(f"Line {index + 1}: product_id must be an integer", details={"line": index + 1})

    if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity < 1:
        raise ValidationError(
            f"Line {index + 1}: quantity must be a whole number of at least 1",
            details={"line": index + 1, "quantity": item.quantity},
        )

    unit_price = item.unit_price
    if unit_price is not None:
        try:
            unit_price = to_decimal(unit_price)
        except ValueError:
            raise ValidationError(f"Line {index + 1}: invalid unit_price", details={"line": index + 1})
        if unit_price <= 0:
            raise ValidationError(
                f"Line {index + 1}: unit_price must be positive",
                details={"line": index + 1, "unit_price": str(unit_price)},
            )
        # unit_price is stored in cents
        if unit_price != unit_price.quantize(CENT):
            raise ValidationError(
                f"Line {index + 1}: unit_price cannot have more than two decimal places",
                details={"line": index + 1, "unit_price": str(unit_price)},
            )

    return LineItemInput(product_id=item.product_id, quantity=item.quantity, unit_price=unit_price)


def coerce_line_items(items: Iterable[Any] | None) -> list[LineItemInput]:
    """Validate raw items (mappings or LineItemInput). An order needs at least one line."""
    raw_items = list(items or [])
    if not raw_items:
        raise ValidationError("An order requires at least one line item")
    return [_coerce_item(raw, i) for i, raw in enumerate(raw_items)]


def load_counterparty(counterparty_id: Any, role: CounterpartyRole) -> Counterparty:
    if not isinstance(counterparty_id, int) or isinstance(counterparty_id, bool):
        raise ValidationError("counterparty_id must be an integer")

    counterparty = lock_for_update(
        db.session.query(Counterparty).filter_by(id=counterparty_id)
    ).first()
    if counterparty is None:
        raise ValidationError(
            f"Counterparty {counterparty_id} not found",
            details={"counterparty_id": counterparty_id},
        )
    if not counterparty.has_role(role):
        raise ValidationError(
            f"Counterparty {counterparty.name} is not a {role.value.lower()}",
            details={"counterparty_id": counterparty_id, "required_role": role.value},
        )
    return counterparty


def price_lines(items: list[LineItemInput]) -> list[PricedLine]:
    """Resolve products and snapshot unit prices. Unknown products are a validation failure."""
    product_ids = {item.product_id for item in items}
    products = {
        p.id: p
        for p in db.session.query(Product).filter(Product.id.in_(product_ids)).all()
    }

    missing = sorted(product_ids - products.keys())
    if missing:
        raise ValidationError(
            f"Product(s) not found: {', '.join(str(pid) for pid in missing)}",
            details={"product_ids": missing},
        )

    priced = []
    for item in items:
        product = products[item.product_id]
        unit_price = item.unit_price if item.unit_price is not None else to_decimal(product.price)
        priced.append(PricedLine(product=product, quantity=item.quantity, unit_price=unit_price))
    return priced


def quantities_by_product(lines: list[PricedLine]) -> dict[int, int]:
    totals: dict[int, int] = {}
    for line in lines:
        totals[line.product.id] = totals.get(line.product.id, 0) + line.quantity
    return totals


def resolve_tax_rate(tax_rate: MoneyInput | None) -> Decimal:
    """Explicit override or the configured ORDER_TAX_RATE."""
    if tax_rate is None:
        rate = default_tax_rate()
    else:
        try:
            rate = normalize_rate(tax_rate)
        except ValueError as exc:
            raise ValidationError(str(exc), details={"tax_rate": str(tax_rate)})

    # order amounts are stored at scale 4, exact for cent prices times cent rates
    if rate != rate.quantize(CENT):
        raise ValidationError(
            "tax rate cannot have more than two decimal places",
            details={"tax_rate": str(rate)},
        )
    return rate


def resolve_order_date(order_date) -> datetime:
    try:
        return normalize_datetime(order_date)
    except ValueError:
        raise ValidationError("order_date must be an ISO-8601 date", details={"order_date": str(order_date)})
