from __future__ import annotations

from ..extensions import db
from bizops.money import to_money_str, to_display_str
from bizops.time_utils import to_utc_z


ORDER_STATUS_PENDING = "Pending"
ORDER_STATUS_FULFILLED = "Fulfilled"
ORDER_STATUS_RECEIVED = "Received"
ORDER_STATUS_CANCELLED = "Cancelled"


class _OrderTotalsMixin:
    """Derived, immutable-after-creation money columns shared by both order types."""

    # Scale 4 keeps subtotal * rate exact for 2-decimal prices and rates
    subtotal = db.Column(db.Numeric(18, 4), nullable=False)
    tax = db.Column(db.Numeric(18, 4), nullable=False)
    total = db.Column(db.Numeric(18, 4), nullable=False)
    tax_rate = db.Column(db.Numeric(6, 4), nullable=False)

    def _totals_dict(self) -> dict:
        return {
            "subtotal": to_money_str(self.subtotal),
            "tax": to_money_str(self.tax),
            "total": to_money_str(self.total),
            "tax_rate": to_money_str(self.tax_rate),
            "display": {
                "subtotal": to_display_str(self.subtotal),
                "tax": to_display_str(self.tax),
                "total": to_display_str(self.total),
            },
        }


class SalesOrder(_OrderTotalsMixin, db.Model):
    """
    Sales order header.

    Created in status Pending together with its lines, the matching stock
    decrements and (optionally) its invoice, in a single transaction.
    """
    __tablename__ = "sales_orders"
    __table_args__ = (
        db.Index("ix_sales_orders_counterparty_date", "counterparty_id", "order_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(64), nullable=False, unique=True)
    counterparty_id = db.Column(db.Integer, db.ForeignKey("counterparties.id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=ORDER_STATUS_PENDING, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    counterparty = db.relationship("Counterparty", backref=db.backref("sales_orders", lazy=True))
    lines = db.relationship(
        "SalesOrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SalesOrderLine.id",
        lazy=True,
    )
    invoice = db.relationship("Invoice", back_populates="sales_order", uselist=False)

    def __repr__(self) -> str:
        return f"<SalesOrder id={self.id} number={self.order_number!r} total={self.total}>"

    def to_dict(self, include_lines: bool = True) -> dict:
        data = {
            "id": self.id,
            "order_number": self.order_number,
            "counterparty_id": self.counterparty_id,
            "order_date": to_utc_z(self.order_date),
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "invoice_id": self.invoice.id if self.invoice else None,
        }
        data.update(self._totals_dict())
        if include_lines:
            data["lines"] = [line.to_dict() for line in self.lines]
        return data


class SalesOrderLine(db.Model):
    """Line item on a sales order. Unit price is a snapshot taken at order time."""
    __tablename__ = "sales_order_lines"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_sales_order_lines_quantity"),
        db.CheckConstraint("unit_price > 0", name="ck_sales_order_lines_price"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("sales_orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    line_total = db.Column(db.Numeric(18, 4), nullable=False)

    order = db.relationship("SalesOrder", back_populates="lines")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": to_money_str(self.unit_price),
            "line_total": to_money_str(self.line_total),
        }


class PurchaseOrder(_OrderTotalsMixin, db.Model):
    """
    Purchase order header.

    Creation never touches stock; goods are counted in by a separate
    receiving step once they are physically on hand.
    """
    __tablename__ = "purchase_orders"
    __table_args__ = (
        db.Index("ix_purchase_orders_counterparty_date", "counterparty_id", "order_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(64), nullable=False, unique=True)
    counterparty_id = db.Column(db.Integer, db.ForeignKey("counterparties.id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=ORDER_STATUS_PENDING, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    counterparty = db.relationship("Counterparty", backref=db.backref("purchase_orders", lazy=True))
    lines = db.relationship(
        "PurchaseOrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderLine.id",
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<PurchaseOrder id={self.id} number={self.order_number!r} total={self.total}>"

    def to_dict(self, include_lines: bool = True) -> dict:
        data = {
            "id": self.id,
            "order_number": self.order_number,
            "counterparty_id": self.counterparty_id,
            "order_date": to_utc_z(self.order_date),
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
        }
        data.update(self._totals_dict())
        if include_lines:
            data["lines"] = [line.to_dict() for line in self.lines]
        return data


class PurchaseOrderLine(db.Model):
    """Line item on a purchase order."""
    __tablename__ = "purchase_order_lines"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_purchase_order_lines_quantity"),
        db.CheckConstraint("unit_price > 0", name="ck_purchase_order_lines_price"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("purchase_orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    line_total = db.Column(db.Numeric(18, 4), nullable=False)

    order = db.relationship("PurchaseOrder", back_populates="lines")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": to_money_str(self.unit_price),
            "line_total": to_money_str(self.line_total),
        }
