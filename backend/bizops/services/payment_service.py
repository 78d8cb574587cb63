# Overview: Payment processor; payment record and wallet balance change in one transaction.

"""
Payment Processing Service

DESIGN PRINCIPLES:
- The signed amount is trusted: positive = income, negative = expense.
  The processor never infers sign from status.
- Wallet balances move only through a relative SQL update
  (balance = balance + amount) in the same transaction as the payment row.
"""

from __future__ import annotations

from decimal import Decimal

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..models import Counterparty, Payment, Wallet
from ..money import MoneyInput, to_decimal
from ..time_utils import utcnow
from .concurrency import lock_for_update, run_unit_of_work
from .errors import ServiceResult, ValidationError


# =============================================================================
# PAYMENT TYPES / STATUS (CONSTANTS)
# =============================================================================

PAYMENT_TYPE_CASH = "Cash"
PAYMENT_TYPE_BANK_TRANSFER = "Bank Transfer"
PAYMENT_TYPE_CARD = "Card"

VALID_PAYMENT_TYPES = [
    PAYMENT_TYPE_CASH,
    PAYMENT_TYPE_BANK_TRANSFER,
    PAYMENT_TYPE_CARD,
]

PAYMENT_STATUS_RECEIVED = "Received"
PAYMENT_STATUS_SENT = "Sent"

VALID_PAYMENT_STATUSES = [
    PAYMENT_STATUS_RECEIVED,
    PAYMENT_STATUS_SENT,
]

# Payment.amount is NUMERIC(14, 4)
AMOUNT_QUANTUM = Decimal("0.0001")
AMOUNT_LIMIT = Decimal("1e10")


# =============================================================================
# PAYMENT CREATION
# =============================================================================

def _create_payment_locked(
    amount: MoneyInput,
    payment_type: str,
    status: str,
    description: str | None,
    counterparty_id: int,
    wallet_id: int,
    sales_order_id: int | None = None,
) -> Payment:
    """Write the payment and move the wallet balance. Caller commits or rolls back."""
    if payment_type not in VALID_PAYMENT_TYPES:
        raise ValidationError(
            f"Invalid payment type: {payment_type}. Must be one of {VALID_PAYMENT_TYPES}"
        )
    if status not in VALID_PAYMENT_STATUSES:
        raise ValidationError(
            f"Invalid payment status: {status}. Must be one of {VALID_PAYMENT_STATUSES}"
        )

    try:
        value = to_decimal(amount)
    except ValueError:
        raise ValidationError("Payment amount must be a number", details={"amount": str(amount)})
    if value == 0:
        raise ValidationError("Payment amount cannot be zero")
    if abs(value) >= AMOUNT_LIMIT:
        raise ValidationError("Payment amount is too large", details={"amount": str(value)})
    if value != value.quantize(AMOUNT_QUANTUM):
        raise ValidationError(
            "Payment amount cannot have more than four decimal places",
            details={"amount": str(value)},
        )

    counterparty = db.session.get(Counterparty, counterparty_id) if isinstance(counterparty_id, int) else None
    if counterparty is None:
        raise ValidationError(
            f"Counterparty {counterparty_id} not found",
            details={"counterparty_id": counterparty_id},
        )

    wallet = None
    if isinstance(wallet_id, int):
        wallet = lock_for_update(db.session.query(Wallet).filter_by(id=wallet_id)).first()
    if wallet is None:
        raise ValidationError(f"Wallet {wallet_id} not found", details={"wallet_id": wallet_id})

    payment = Payment(
        date=utcnow(),
        amount=value,
        type=payment_type,
        status=status,
        description=description,
        counterparty_id=counterparty.id,
        wallet_id=wallet.id,
        sales_order_id=sales_order_id,
    )
    db.session.add(payment)
    db.session.flush()

    db.session.execute(
        update(Wallet)
        .where(Wallet.id == wallet.id)
        .values(balance=Wallet.balance + value)
        .execution_options(synchronize_session=False)
    )
    db.session.expire(wallet, ["balance"])

    return payment


def create_payment(
    amount: MoneyInput,
    payment_type: str,
    status: str,
    description: str | None,
    counterparty_id: int,
    wallet_id: int,
) -> ServiceResult[Payment]:
    """
    Record a payment against a wallet.

    Args:
        amount: Signed amount (positive = received, negative = sent)
        payment_type: Cash, Bank Transfer, Card
        status: Received or Sent
        description: Free text shown on statements
        counterparty_id: Client/vendor on the other side
        wallet_id: Wallet whose balance moves by `amount`

    Returns:
        ServiceResult with the Payment, or ValidationError / StorageError.
    """
    def _op():
        return _create_payment_locked(
            amount, payment_type, status, description, counterparty_id, wallet_id
        )

    result = run_unit_of_work(_op, operation="create_payment")
    if result.ok:
        current_app.logger.info(
            "Recorded payment %s of %s to wallet %s",
            result.value.id, result.value.amount, result.value.wallet_id,
        )
    return result


def _magnitude(amount: MoneyInput) -> Decimal | MoneyInput:
    try:
        return abs(to_decimal(amount))
    except ValueError:
        return amount


def record_income(
    amount: MoneyInput,
    payment_type: str,
    description: str | None,
    counterparty_id: int,
    wallet_id: int,
) -> ServiceResult[Payment]:
    """Income from a client: stores +|amount| with status Received."""
    return create_payment(
        _magnitude(amount), payment_type, PAYMENT_STATUS_RECEIVED, description, counterparty_id, wallet_id
    )


def record_expense(
    amount: MoneyInput,
    payment_type: str,
    description: str | None,
    counterparty_id: int,
    wallet_id: int,
) -> ServiceResult[Payment]:
    """Expense to a vendor: stores -|amount| with status Sent."""
    magnitude = _magnitude(amount)
    signed = -magnitude if isinstance(magnitude, Decimal) else magnitude
    return create_payment(
        signed, payment_type, PAYMENT_STATUS_SENT, description, counterparty_id, wallet_id
    )


# =============================================================================
# QUERIES
# =============================================================================

def get_wallet(wallet_id: int) -> Wallet | None:
    return db.session.get(Wallet, wallet_id)


def list_wallets() -> list[Wallet]:
    return db.session.query(Wallet).order_by(Wallet.name).all()


def list_payments(wallet_id: int | None = None, limit: int = 100) -> list[Payment]:
    query = db.session.query(Payment)
    if wallet_id is not None:
        query = query.filter_by(wallet_id=wallet_id)
    return query.order_by(Payment.date.desc(), Payment.id.desc()).limit(limit).all()
