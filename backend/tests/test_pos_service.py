# Overview: Pytest coverage for point-of-sale checkout.

from decimal import Decimal

import pytest

from bizops.models import Payment, SalesOrder
from bizops.services import sales_order_service
from bizops.services.errors import InsufficientStock, ValidationError
from bizops.services.pos_service import checkout


@pytest.fixture
def pos_setup(app, make_counterparty, make_wallet):
    customer = make_counterparty(name=app.config["POS_CUSTOMER_NAME"])
    drawer = make_wallet(name=app.config["POS_WALLET_NAME"], balance="100.00")
    return customer, drawer


def test_checkout_creates_order_and_payment(db_session, pos_setup, keyboard, webcam, stock_of, balance_of):
    customer, drawer = pos_setup

    result = checkout([
        {"product_id": keyboard.id, "quantity": 1},
        {"product_id": webcam.id, "quantity": 1},
    ])

    assert result.ok, result.message
    receipt = result.value
    assert receipt.order.counterparty_id == customer.id
    assert receipt.order.total == Decimal("142.978")
    assert receipt.payment.amount == receipt.order.total
    assert receipt.payment.status == "Received"
    assert receipt.payment.sales_order_id == receipt.order.id
    assert receipt.order.invoice is None
    assert balance_of(drawer.id) == Decimal("242.978")
    assert stock_of(keyboard.id) == 9
    assert stock_of(webcam.id) == 19

    body = receipt.to_dict()
    assert body["sales_order"]["display"]["total"] == "142.98"
    assert body["payment"]["wallet_id"] == drawer.id


def test_insufficient_stock_leaves_nothing_behind(db_session, pos_setup, keyboard, coffee, stock_of, balance_of):
    _, drawer = pos_setup

    result = checkout([
        {"product_id": keyboard.id, "quantity": 1},
        {"product_id": coffee.id, "quantity": 1},
    ])

    assert isinstance(result.error, InsufficientStock)
    assert stock_of(keyboard.id) == 10
    assert balance_of(drawer.id) == Decimal("100.00")
    assert db_session.query(SalesOrder).count() == 0
    assert db_session.query(Payment).count() == 0


def test_payment_failure_undoes_the_sale(db_session, pos_setup, keyboard, stock_of):
    result = checkout([{"product_id": keyboard.id, "quantity": 1}], payment_type="Barter")

    assert isinstance(result.error, ValidationError)
    assert stock_of(keyboard.id) == 10
    assert db_session.query(SalesOrder).count() == 0


def test_missing_seed_data(db_session, keyboard):
    result = checkout([{"product_id": keyboard.id, "quantity": 1}])

    assert isinstance(result.error, ValidationError)
    assert "seed" in result.message


def test_collision_retry_with_generator_items(db_session, pos_setup, keyboard, monkeypatch, stock_of):
    numbers = iter(["SO-FIXED", "SO-FIXED", "SO-FRESH"])
    monkeypatch.setattr(sales_order_service, "generate_order_number", lambda kind: next(numbers))

    assert checkout([{"product_id": keyboard.id, "quantity": 1}]).ok
    result = checkout(item for item in [{"product_id": keyboard.id, "quantity": 1}])

    assert result.ok, result.message
    assert result.value.order.order_number == "SO-FRESH"
    assert stock_of(keyboard.id) == 8
    assert db_session.query(Payment).count() == 2
