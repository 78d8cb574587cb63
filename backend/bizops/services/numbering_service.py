# Overview: Order number and invoice number generation.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import update

from ..extensions import db
from ..models import DocumentSequence
from ..time_utils import utcnow


ORDER_KIND_SALES = "sales"
ORDER_KIND_PURCHASE = "purchase"

ORDER_PREFIXES = {
    ORDER_KIND_SALES: "SO",
    ORDER_KIND_PURCHASE: "PO",
}

INVOICE_PREFIX = "INV"


def generate_order_number(kind: str, now: datetime | None = None) -> str:
    """
    Human-readable order number, e.g. "SO-20261019143015123456".

    Time-based and only best-effort unique. The unique index on
    order_number catches collisions; the unit of work retries them.
    """
    prefix = ORDER_PREFIXES.get(kind)
    if prefix is None:
        raise ValueError(f"unknown order kind: {kind!r}")
    now = now or utcnow()
    return f"{prefix}-{now:%Y%m%d%H%M%S%f}"


def next_document_number(*, document_type: str) -> int:
    """
    Allocate the next number for `document_type` inside the caller's transaction.

    Relative UPDATE first; the row is created on first use. A concurrent
    first insert surfaces as IntegrityError and is retried by the caller's
    unit of work.
    """
    stmt = (
        update(DocumentSequence)
        .where(DocumentSequence.document_type == document_type)
        .values(next_number=DocumentSequence.next_number + 1)
        .execution_options(synchronize_session=False)
    )

    result = db.session.execute(stmt)
    if result.rowcount:
        current = (
            db.session.query(DocumentSequence.next_number)
            .filter_by(document_type=document_type)
            .scalar()
        )
        return current - 1

    seq = DocumentSequence(document_type=document_type, next_number=2)
    db.session.add(seq)
    db.session.flush()
    return 1


def next_invoice_number(issue_date: datetime | None = None) -> str:
    """Gap-free per-year invoice number, e.g. "INV-2026-0001"."""
    year = (issue_date or utcnow()).year
    number = next_document_number(document_type=f"INVOICE-{year}")
    return f"{INVOICE_PREFIX}-{year}-{number:04d}"
