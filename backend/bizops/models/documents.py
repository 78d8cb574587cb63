from __future__ import annotations

from ..extensions import db
from bizops.money import to_money_str, to_display_str
from bizops.time_utils import to_utc_z


INVOICE_STATUS_DRAFT = "Draft"
INVOICE_STATUS_PAID = "Paid"
INVOICE_STATUS_OVERDUE = "Overdue"


class Invoice(db.Model):
    """
    Invoice emitted from a sales order.

    `total` is a snapshot of the order total at creation time; the order
    stays the source of truth and later changes do not flow back here.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.Index("ix_invoices_status_due", "status", "due_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(64), nullable=False, unique=True)
    issue_date = db.Column(db.DateTime(timezone=True), nullable=False)
    due_date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=INVOICE_STATUS_DRAFT, index=True)
    total = db.Column(db.Numeric(18, 4), nullable=False)

    counterparty_id = db.Column(db.Integer, db.ForeignKey("counterparties.id"), nullable=False, index=True)
    sales_order_id = db.Column(db.Integer, db.ForeignKey("sales_orders.id"), nullable=False, unique=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    counterparty = db.relationship("Counterparty", backref=db.backref("invoices", lazy=True))
    sales_order = db.relationship("SalesOrder", back_populates="invoice")

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} number={self.invoice_number!r} total={self.total}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "issue_date": to_utc_z(self.issue_date),
            "due_date": to_utc_z(self.due_date),
            "status": self.status,
            "total": to_money_str(self.total),
            "total_display": to_display_str(self.total),
            "counterparty_id": self.counterparty_id,
            "sales_order_id": self.sales_order_id,
            "created_at": to_utc_z(self.created_at),
        }


class DocumentSequence(db.Model):
    """
    Atomic document sequences.

    WHY: Invoice numbers must be gap-free per year and race-free, unlike
    order numbers which are timestamp based.
    """
    __tablename__ = "document_sequences"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String(32), nullable=False, unique=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "document_type": self.document_type,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
