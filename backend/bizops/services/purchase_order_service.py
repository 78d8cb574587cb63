# Overview: Purchase order processor; persists vendor orders without touching stock.

from __future__ import annotations

from typing import Any, Iterable

from flask import current_app

from ..extensions import db
from ..models import CounterpartyRole, PurchaseOrder, PurchaseOrderLine
from ..models.orders import ORDER_STATUS_PENDING
from ..money import MoneyInput
from .concurrency import run_unit_of_work
from .errors import ServiceResult
from .numbering_service import ORDER_KIND_PURCHASE, generate_order_number
from .order_lines import (
    coerce_line_items,
    load_counterparty,
    price_lines,
    resolve_order_date,
    resolve_tax_rate,
)
from .pricing_service import compute_totals, line_total


def create_purchase_order(
    counterparty_id: int,
    order_date,
    items: Iterable[Any],
    tax_rate: MoneyInput | None = None,
) -> ServiceResult[PurchaseOrder]:
    """
    Create a purchase order atomically.

    Stock is NOT incremented here. Goods count as on hand only once they
    are received, which is a separate step.

    Returns:
        ServiceResult with the PurchaseOrder, or a ValidationError /
        StorageError failure.
    """
    items = list(items or [])

    def _op():
        rate = resolve_tax_rate(tax_rate)
        order_dt = resolve_order_date(order_date)
        line_items = coerce_line_items(items)

        vendor = load_counterparty(counterparty_id, CounterpartyRole.VENDOR)
        lines = price_lines(line_items)
        totals = compute_totals(lines, rate)

        order = PurchaseOrder(
            order_number=generate_order_number(ORDER_KIND_PURCHASE),
            counterparty_id=vendor.id,
            order_date=order_dt,
            status=ORDER_STATUS_PENDING,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            tax_rate=rate,
        )
        for line in lines:
            order.lines.append(PurchaseOrderLine(
                product_id=line.product.id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line_total(line.quantity, line.unit_price),
            ))

        db.session.add(order)
        db.session.flush()
        return order

    result = run_unit_of_work(_op, operation="create_purchase_order")
    if result.ok:
        current_app.logger.info(
            "Created purchase order %s (total=%s)", result.value.order_number, result.value.total
        )
    return result


def get_purchase_order(order_id: int) -> PurchaseOrder | None:
    return db.session.get(PurchaseOrder, order_id)


def list_purchase_orders(status: str | None = None, limit: int = 100) -> list[PurchaseOrder]:
    query = db.session.query(PurchaseOrder)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).limit(limit).all()
