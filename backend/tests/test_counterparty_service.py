# Overview: Pytest coverage for client/vendor creation and listing.

import pytest

from bizops.models import Counterparty, CounterpartyRole
from bizops.services.counterparty_service import (
    create_counterparty,
    get_counterparty,
    list_counterparties,
)
from bizops.services.errors import ValidationError


class TestCreateCounterparty:

    def test_creates_client(self, db_session):
        result = create_counterparty("  Innovate Inc. ", ["CLIENT"], email="billing@innovate.example")

        assert result.ok, result.message
        party = result.value
        assert party.name == "Innovate Inc."
        assert party.roles == {CounterpartyRole.CLIENT}
        assert party.email == "billing@innovate.example"
        assert get_counterparty(party.id).id == party.id

    def test_both_roles(self, db_session):
        result = create_counterparty("Both Ways Ltd", [CounterpartyRole.VENDOR, CounterpartyRole.CLIENT])

        assert result.ok, result.message
        assert result.value.types == "CLIENT,VENDOR"

    def test_single_role_string(self, db_session):
        result = create_counterparty("Office Supplies Co.", "VENDOR")

        assert result.value.roles == {CounterpartyRole.VENDOR}

    @pytest.mark.parametrize("roles", [[], None, ["SUPPLIER"], [None]])
    def test_role_required(self, db_session, roles):
        result = create_counterparty("Nobody", roles)

        assert isinstance(result.error, ValidationError)
        assert db_session.query(Counterparty).count() == 0

    @pytest.mark.parametrize("name", [None, "", "   ", 42])
    def test_name_required(self, db_session, name):
        assert isinstance(create_counterparty(name, ["CLIENT"]).error, ValidationError)


def test_list_filters_by_role(db_session, client_party, vendor_party):
    assert {c.id for c in list_counterparties()} == {client_party.id, vendor_party.id}
    assert [c.id for c in list_counterparties(role="VENDOR")] == [vendor_party.id]
    assert [c.id for c in list_counterparties(role=CounterpartyRole.CLIENT)] == [client_party.id]
