# Overview: Point-of-sale checkout; walk-in sales order plus cash-drawer payment, atomically.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from flask import current_app

from ..extensions import db
from ..models import Counterparty, Payment, SalesOrder, Wallet
from .concurrency import run_unit_of_work
from .errors import ServiceResult, ValidationError
from .payment_service import PAYMENT_STATUS_RECEIVED, PAYMENT_TYPE_CASH, _create_payment_locked
from .sales_order_service import _create_sales_order_locked


@dataclass
class PosReceipt:
    order: SalesOrder
    payment: Payment

    def to_dict(self) -> dict:
        return {
            "sales_order": self.order.to_dict(),
            "payment": self.payment.to_dict(),
        }


def checkout(
    items: Iterable[Any],
    *,
    customer_name: str | None = None,
    wallet_name: str | None = None,
    payment_type: str = PAYMENT_TYPE_CASH,
) -> ServiceResult[PosReceipt]:
    """
    Ring up a counter sale.

    Creates a sales order for the walk-in customer (same stock rules as any
    sales order, no invoice) and records a Received payment for the order
    total into the drawer wallet. The tax rate is the configured order rate.
    """
    customer_name = customer_name or current_app.config["POS_CUSTOMER_NAME"]
    wallet_name = wallet_name or current_app.config["POS_WALLET_NAME"]
    items = list(items or [])

    def _op():
        customer = db.session.query(Counterparty).filter_by(name=customer_name).first()
        if customer is None:
            raise ValidationError(
                f"POS customer '{customer_name}' not found; run `flask system seed`",
                details={"customer_name": customer_name},
            )
        wallet = db.session.query(Wallet).filter_by(name=wallet_name).first()
        if wallet is None:
            raise ValidationError(
                f"POS wallet '{wallet_name}' not found; run `flask system seed`",
                details={"wallet_name": wallet_name},
            )

        order = _create_sales_order_locked(customer.id, None, items)
        payment = _create_payment_locked(
            order.total,
            payment_type,
            PAYMENT_STATUS_RECEIVED,
            f"POS sale {order.order_number}",
            customer.id,
            wallet.id,
            sales_order_id=order.id,
        )
        return PosReceipt(order=order, payment=payment)

    result = run_unit_of_work(_op, operation="pos_checkout")
    if result.ok:
        current_app.logger.info(
            "POS checkout %s paid %s into %s",
            result.value.order.order_number, result.value.payment.amount, wallet_name,
        )
    return result
