# Overview: Sales order processor; order, stock decrement and optional invoice in one transaction.

"""
Sales Order Processing

Invariants (authoritative):
- An order has at least one line and its counterparty holds the CLIENT role.
- Stock is decremented with a conditional UPDATE (stock >= qty) in the same
  transaction as the order insert. A zero rowcount aborts everything with
  InsufficientStock, so no observer sees an order without its stock change.
- Quantities for a product that appears on several lines are summed before
  the stock check.
- The optional invoice copies the order total at creation time and is due
  INVOICE_DUE_DAYS (30) after its issue date.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..models import CounterpartyRole, Invoice, Product, SalesOrder, SalesOrderLine
from ..models.documents import INVOICE_STATUS_DRAFT
from ..models.orders import ORDER_STATUS_PENDING
from ..money import MoneyInput
from ..time_utils import utcnow
from .concurrency import run_unit_of_work
from .errors import InsufficientStock, ServiceResult
from .numbering_service import ORDER_KIND_SALES, generate_order_number, next_invoice_number
from .order_lines import (
    PricedLine,
    coerce_line_items,
    load_counterparty,
    price_lines,
    quantities_by_product,
    resolve_order_date,
    resolve_tax_rate,
)
from .pricing_service import compute_totals, line_total


def _decrement_stock(lines: list[PricedLine]) -> None:
    names = {line.product.id: line.product.name for line in lines}
    insufficient = []

    for product_id, quantity in quantities_by_product(lines).items():
        result = db.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            available = db.session.query(Product.stock).filter_by(id=product_id).scalar() or 0
            insufficient.append({
                "product_id": product_id,
                "product_name": names[product_id],
                "requested": quantity,
                "available": available,
            })

    for line in lines:
        db.session.expire(line.product, ["stock"])

    if insufficient:
        first = insufficient[0]
        raise InsufficientStock(
            product_id=first["product_id"],
            product_name=first["product_name"],
            requested=first["requested"],
            available=first["available"],
            details={"items": insufficient},
        )


def _emit_invoice(order: SalesOrder) -> Invoice:
    issue_date = utcnow()
    due_days = current_app.config.get("INVOICE_DUE_DAYS", 30)

    invoice = Invoice(
        invoice_number=next_invoice_number(issue_date),
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=due_days),
        status=INVOICE_STATUS_DRAFT,
        total=order.total,
        counterparty_id=order.counterparty_id,
        sales_order_id=order.id,
    )
    db.session.add(invoice)
    db.session.flush()
    return invoice


def _create_sales_order_locked(
    counterparty_id: int,
    order_date,
    items: Iterable[Any],
    *,
    generate_invoice: bool = False,
    tax_rate: MoneyInput | None = None,
) -> SalesOrder:
    """Build the order inside the current transaction. Caller commits or rolls back."""
    rate = resolve_tax_rate(tax_rate)
    order_dt = resolve_order_date(order_date)
    line_items = coerce_line_items(items)

    counterparty = load_counterparty(counterparty_id, CounterpartyRole.CLIENT)
    lines = price_lines(line_items)

    totals = compute_totals(lines, rate)

    order = SalesOrder(
        order_number=generate_order_number(ORDER_KIND_SALES),
        counterparty_id=counterparty.id,
        order_date=order_dt,
        status=ORDER_STATUS_PENDING,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        tax_rate=rate,
    )
    for line in lines:
        order.lines.append(SalesOrderLine(
            product_id=line.product.id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line_total(line.quantity, line.unit_price),
        ))

    db.session.add(order)
    db.session.flush()

    _decrement_stock(lines)

    if generate_invoice:
        _emit_invoice(order)

    return order


def create_sales_order(
    counterparty_id: int,
    order_date,
    items: Iterable[Any],
    generate_invoice: bool = False,
    tax_rate: MoneyInput | None = None,
) -> ServiceResult[SalesOrder]:
    """
    Create a sales order atomically.

    Args:
        counterparty_id: Client placing the order (must hold CLIENT role)
        order_date: datetime/date/ISO string, or None for now
        items: LineItemInput objects or {"product_id", "quantity", "unit_price"?} mappings
        generate_invoice: Also emit a Draft invoice for the order total
        tax_rate: Override for the configured ORDER_TAX_RATE

    Returns:
        ServiceResult with the SalesOrder, or a ValidationError /
        InsufficientStock / StorageError failure. Nothing is persisted on failure.
    """
    # drained once; every retry attempt reuses the list
    items = list(items or [])

    def _op():
        return _create_sales_order_locked(
            counterparty_id,
            order_date,
            items,
            generate_invoice=generate_invoice,
            tax_rate=tax_rate,
        )

    result = run_unit_of_work(_op, operation="create_sales_order")
    if result.ok:
        order = result.value
        current_app.logger.info(
            "Created sales order %s (total=%s, invoice=%s)",
            order.order_number, order.total, bool(order.invoice),
        )
    return result


def get_sales_order(order_id: int) -> SalesOrder | None:
    return db.session.get(SalesOrder, order_id)


def list_sales_orders(status: str | None = None, limit: int = 100) -> list[SalesOrder]:
    query = db.session.query(SalesOrder)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(SalesOrder.order_date.desc(), SalesOrder.id.desc()).limit(limit).all()


def list_invoices(status: str | None = None, limit: int = 100) -> list[Invoice]:
    query = db.session.query(Invoice)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).limit(limit).all()
