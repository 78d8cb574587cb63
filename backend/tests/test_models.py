# Overview: Pytest coverage for model helpers (counterparty roles, money formatting).

from decimal import Decimal

import pytest

from bizops.models import Counterparty, CounterpartyRole
from bizops.models.counterparties import parse_roles, serialize_roles
from bizops.money import to_decimal, to_money_str


def test_roles_round_trip_through_tag_string():
    party = Counterparty(name="Both Ways Ltd", roles=[CounterpartyRole.VENDOR, "CLIENT"])

    assert party.types == "CLIENT,VENDOR"
    assert party.roles == frozenset({CounterpartyRole.CLIENT, CounterpartyRole.VENDOR})


def test_parse_roles_tolerates_spacing_and_case():
    assert parse_roles(" client , VENDOR ") == {CounterpartyRole.CLIENT, CounterpartyRole.VENDOR}
    assert parse_roles(None) == frozenset()


def test_counterparty_needs_a_role():
    with pytest.raises(ValueError):
        Counterparty(name="Nobody")
    with pytest.raises(ValueError):
        serialize_roles([])


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        serialize_roles(["SUPPLIER"])


@pytest.mark.parametrize("raw, expected", [
    (79.99, Decimal("79.99")),
    ("  12.50 ", Decimal("12.50")),
    (3, Decimal("3")),
])
def test_to_decimal(raw, expected):
    assert to_decimal(raw) == expected


@pytest.mark.parametrize("raw", [True, "NaN", "Infinity", None, "1,00"])
def test_to_decimal_rejects(raw):
    with pytest.raises(ValueError):
        to_decimal(raw)


def test_to_money_str_keeps_sub_cent_precision():
    assert to_money_str(Decimal("87.9890")) == "87.989"
    assert to_money_str(Decimal("5000")) == "5000.00"
