# Overview: Competing sales against one file-backed database; stock must never be oversold.

"""
Concurrent Sales Tests

Each worker thread pushes its own app context, so it gets its own session
and its own SQLite connection. A barrier releases them together.
"""

import threading
from decimal import Decimal

import pytest
from bizops import create_app
from bizops.config import TestingConfig
from bizops.extensions import db
from bizops.models import Counterparty, CounterpartyRole, Product, SalesOrder
from bizops.services.errors import InsufficientStock, StorageError
from bizops.services.sales_order_service import create_sales_order


@pytest.fixture
def file_app(tmp_path):
    """App bound to a throwaway on-disk database shared by several connections."""
    database_uri = f"sqlite:///{tmp_path / 'race.sqlite3'}"

    class FileBackedConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = database_uri
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 30}}
        RETRY_ATTEMPTS = 8
        RETRY_BACKOFF_BASE = 0.02

    app = create_app(FileBackedConfig)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def stocked(file_app):
    def _make(stock):
        with file_app.app_context():
            party = Counterparty(name="Innovate Inc.", roles={CounterpartyRole.CLIENT})
            product = Product(sku="KB-4532", name="Ergo-Comfort Keyboard", price=Decimal("79.99"), stock=stock)
            db.session.add_all([party, product])
            db.session.commit()
            return party.id, product.id
    return _make


def _race(app, counterparty_id, product_id, quantity, workers):
    barrier = threading.Barrier(workers)
    results = []
    crashes = []

    def _sell():
        with app.app_context():
            barrier.wait()
            try:
                results.append(create_sales_order(
                    counterparty_id, None, [{"product_id": product_id, "quantity": quantity}]
                ))
            except Exception as exc:
                crashes.append(exc)

    threads = [threading.Thread(target=_sell) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert not crashes, crashes
    assert len(results) == workers
    return results


def _persisted(app, product_id):
    with app.app_context():
        stock = db.session.query(Product.stock).filter_by(id=product_id).scalar()
        orders = db.session.query(SalesOrder).count()
    return stock, orders


def test_two_buyers_for_the_last_units(file_app, stocked):
    counterparty_id, product_id = stocked(5)

    results = _race(file_app, counterparty_id, product_id, quantity=5, workers=2)

    winners = [r for r in results if r.ok]
    losers = [r for r in results if not r.ok]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0].error, (InsufficientStock, StorageError))
    assert _persisted(file_app, product_id) == (0, 1)


@pytest.mark.parametrize("stock, quantity, workers, expected_sales", [
    (5, 2, 3, 2),
    (4, 1, 4, 4),
])
def test_stock_is_never_oversold(file_app, stocked, stock, quantity, workers, expected_sales):
    counterparty_id, product_id = stocked(stock)

    results = _race(file_app, counterparty_id, product_id, quantity=quantity, workers=workers)

    assert sum(1 for r in results if r.ok) == expected_sales
    assert _persisted(file_app, product_id) == (stock - expected_sales * quantity, expected_sales)
