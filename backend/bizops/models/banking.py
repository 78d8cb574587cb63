from __future__ import annotations

from ..extensions import db
from bizops.money import to_money_str, to_display_str
from bizops.time_utils import to_utc_z


class Wallet(db.Model):
    """
    Internal representation of a real-world cash or bank account.

    `balance` is signed and changes only through the payment processor,
    which applies SQL-side increments (balance = balance + amount).
    """
    __tablename__ = "wallets"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    balance = db.Column(db.Numeric(18, 4), nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Wallet id={self.id} name={self.name!r} balance={self.balance}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "balance": to_money_str(self.balance),
            "created_at": to_utc_z(self.created_at),
        }


class Payment(db.Model):
    """
    Money movement against a wallet.

    SIGN CONVENTION:
    - amount > 0: income (status "Received")
    - amount < 0: expense (status "Sent")

    TYPES: "Cash", "Bank Transfer", "Card"
    """
    __tablename__ = "payments"
    __table_args__ = (
        db.Index("ix_payments_wallet_date", "wallet_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.DateTime(timezone=True), nullable=False)
    amount = db.Column(db.Numeric(14, 4), nullable=False)
    type = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(16), nullable=False, index=True)
    description = db.Column(db.String(512), nullable=True)

    counterparty_id = db.Column(db.Integer, db.ForeignKey("counterparties.id"), nullable=False, index=True)
    wallet_id = db.Column(db.Integer, db.ForeignKey("wallets.id"), nullable=False, index=True)

    # Set when the payment settles a sales order (POS checkout)
    sales_order_id = db.Column(db.Integer, db.ForeignKey("sales_orders.id"), nullable=True, index=True)

    counterparty = db.relationship("Counterparty", backref=db.backref("payments", lazy=True))
    wallet = db.relationship("Wallet", backref=db.backref("payments", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_utc_z(self.date),
            "amount": to_money_str(self.amount),
            "amount_display": to_display_str(self.amount),
            "type": self.type,
            "status": self.status,
            "description": self.description,
            "counterparty_id": self.counterparty_id,
            "wallet_id": self.wallet_id,
            "sales_order_id": self.sales_order_id,
        }
