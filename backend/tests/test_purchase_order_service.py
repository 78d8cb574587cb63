# Overview: Pytest coverage for purchase order processing.

from decimal import Decimal

from bizops.models import CounterpartyRole, PurchaseOrder, PurchaseOrderLine
from bizops.services import purchase_order_service
from bizops.services.errors import ValidationError
from bizops.services.purchase_order_service import create_purchase_order


class TestCreatePurchaseOrder:

    def test_creates_order_without_touching_stock(self, db_session, vendor_party, keyboard, webcam, stock_of):
        result = create_purchase_order(
            vendor_party.id,
            "2026-10-01T09:30:00Z",
            [
                {"product_id": keyboard.id, "quantity": 50, "unit_price": "45.00"},
                {"product_id": webcam.id, "quantity": 10},
            ],
        )

        assert result.ok, result.message
        order = result.value
        assert order.order_number.startswith("PO-")
        assert order.status == "Pending"
        assert order.subtotal == Decimal("2250.00") + Decimal("499.90")
        assert order.tax == order.subtotal * Decimal("0.10")
        assert order.total == order.subtotal + order.tax
        assert stock_of(keyboard.id) == 10
        assert stock_of(webcam.id) == 20

    def test_order_for_out_of_stock_product_is_fine(self, db_session, vendor_party, coffee):
        result = create_purchase_order(vendor_party.id, None, [{"product_id": coffee.id, "quantity": 100}])

        assert result.ok, result.message

    def test_client_only_counterparty_rejected(self, db_session, client_party, keyboard):
        result = create_purchase_order(client_party.id, None, [{"product_id": keyboard.id, "quantity": 1}])

        assert isinstance(result.error, ValidationError)
        assert result.error.details["required_role"] == "VENDOR"
        assert db_session.query(PurchaseOrder).count() == 0

    def test_dual_role_counterparty_accepted(self, db_session, make_counterparty, keyboard):
        both = make_counterparty(name="Both Ways Ltd", roles=(CounterpartyRole.CLIENT, CounterpartyRole.VENDOR))

        assert create_purchase_order(both.id, None, [{"product_id": keyboard.id, "quantity": 1}]).ok

    def test_empty_items_rejected(self, db_session, vendor_party):
        result = create_purchase_order(vendor_party.id, None, [])

        assert isinstance(result.error, ValidationError)
        assert db_session.query(PurchaseOrder).count() == 0
        assert db_session.query(PurchaseOrderLine).count() == 0

    def test_unknown_product_rejected(self, db_session, vendor_party):
        result = create_purchase_order(vendor_party.id, None, [{"product_id": 777, "quantity": 1}])

        assert isinstance(result.error, ValidationError)

    def test_get_and_list(self, db_session, vendor_party, keyboard):
        created = create_purchase_order(vendor_party.id, None, [{"product_id": keyboard.id, "quantity": 1}]).value

        assert purchase_order_service.get_purchase_order(created.id).order_number == created.order_number
        assert [o.id for o in purchase_order_service.list_purchase_orders()] == [created.id]


def test_collision_retry_with_generator_items(db_session, vendor_party, keyboard, monkeypatch):
    numbers = iter(["PO-FIXED", "PO-FIXED", "PO-FRESH"])
    monkeypatch.setattr(purchase_order_service, "generate_order_number", lambda kind: next(numbers))

    assert create_purchase_order(vendor_party.id, None, [{"product_id": keyboard.id, "quantity": 1}]).ok
    result = create_purchase_order(vendor_party.id, None, (item for item in [{"product_id": keyboard.id, "quantity": 3}]))

    assert result.ok, result.message
    assert result.value.order_number == "PO-FRESH"
    assert db_session.query(PurchaseOrderLine).count() == 2
