from __future__ import annotations

import enum

from ..extensions import db
from bizops.time_utils import to_utc_z


class CounterpartyRole(str, enum.Enum):
    CLIENT = "CLIENT"
    VENDOR = "VENDOR"


ROLE_SEPARATOR = ","


def parse_roles(raw: str | None) -> frozenset[CounterpartyRole]:
    """Parse the stored role tag string ("CLIENT,VENDOR") into enum tags."""
    if not raw:
        return frozenset()
    roles = set()
    for tag in raw.split(ROLE_SEPARATOR):
        tag = tag.strip().upper()
        if tag:
            roles.add(CounterpartyRole(tag))
    return frozenset(roles)


def serialize_roles(roles) -> str:
    tags = sorted({CounterpartyRole(r).value for r in roles})
    if not tags:
        raise ValueError("counterparty requires at least one role")
    return ROLE_SEPARATOR.join(tags)


class Counterparty(db.Model):
    """
    Client or vendor master data.

    Roles are not mutually exclusive; a counterparty may be both a CLIENT and
    a VENDOR. Storage keeps them as a delimited tag string in `types`.

    Orders, payments and invoices reference counterparties but never
    cascade-delete them.
    """
    __tablename__ = "counterparties"
    __table_args__ = (
        db.Index("ix_counterparties_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    address = db.Column(db.String(512), nullable=True)

    # e.g. "CLIENT", "VENDOR" or "CLIENT,VENDOR"
    types = db.Column(db.String(64), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __init__(self, *, roles=None, **kwargs):
        if roles is not None:
            kwargs["types"] = serialize_roles(roles)
        elif not kwargs.get("types"):
            raise ValueError("counterparty requires at least one role")
        super().__init__(**kwargs)

    @property
    def roles(self) -> frozenset[CounterpartyRole]:
        return parse_roles(self.types)

    @roles.setter
    def roles(self, value) -> None:
        self.types = serialize_roles(value)

    def has_role(self, role: CounterpartyRole) -> bool:
        return role in self.roles

    def __repr__(self) -> str:
        return f"<Counterparty id={self.id} name={self.name!r} types={self.types!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "roles": sorted(r.value for r in self.roles),
            "created_at": to_utc_z(self.created_at),
        }
