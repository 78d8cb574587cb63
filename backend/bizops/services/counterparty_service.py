# Overview: Client/vendor master data; creation and listing.

from __future__ import annotations

from typing import Iterable

from flask import current_app

from ..extensions import db
from ..models import Counterparty, CounterpartyRole
from ..models.counterparties import serialize_roles
from .concurrency import run_unit_of_work
from .errors import ServiceResult, ValidationError


def _clean(value, field: str, *, required: bool = False, max_length: int = 255) -> str | None:
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if not value:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field} is too long (max {max_length})")
    return value


def create_counterparty(
    name: str,
    roles: Iterable[CounterpartyRole | str],
    *,
    email: str | None = None,
    phone: str | None = None,
    address: str | None = None,
) -> ServiceResult[Counterparty]:
    """
    Create a client and/or vendor.

    At least one role is required; CLIENT and VENDOR may be combined.
    """
    role_list = [roles] if isinstance(roles, str) else list(roles or [])

    def _op():
        try:
            types = serialize_roles(role_list)
        except ValueError:
            raise ValidationError(
                "roles must name at least one of CLIENT, VENDOR",
                details={"roles": [str(r) for r in role_list]},
            )

        counterparty = Counterparty(
            name=_clean(name, "name", required=True),
            email=_clean(email, "email"),
            phone=_clean(phone, "phone", max_length=32),
            address=_clean(address, "address", max_length=512),
            types=types,
        )
        db.session.add(counterparty)
        db.session.flush()
        return counterparty

    result = run_unit_of_work(_op, operation="create_counterparty")
    if result.ok:
        current_app.logger.info(
            "Created counterparty %s (%s)", result.value.id, result.value.types
        )
    return result


def get_counterparty(counterparty_id: int) -> Counterparty | None:
    return db.session.get(Counterparty, counterparty_id)


def list_counterparties(role: CounterpartyRole | str | None = None) -> list[Counterparty]:
    """Newest first; `role` keeps only counterparties holding that role."""
    counterparties = (
        db.session.query(Counterparty)
        .order_by(Counterparty.created_at.desc(), Counterparty.id.desc())
        .all()
    )
    if role is None:
        return counterparties
    role = CounterpartyRole(role)
    return [c for c in counterparties if c.has_role(role)]
