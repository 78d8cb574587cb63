"""
Pytest fixtures for bizops backend tests.

Provides an in-memory database, a per-test table wipe, and factories for
counterparties, products and wallets.
"""

from decimal import Decimal

import pytest
from bizops import create_app
from bizops.config import TestingConfig
from bizops.extensions import db
from bizops.models import Counterparty, CounterpartyRole, Product, Wallet


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table before each test, keep the schema."""
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    # Cleanup after test
    db.session.rollback()


@pytest.fixture(scope='function')
def make_counterparty(db_session):
    def _make(name="Acme Corp", roles=(CounterpartyRole.CLIENT,), **kwargs):
        counterparty = Counterparty(name=name, roles=set(roles), **kwargs)
        db_session.add(counterparty)
        db_session.commit()
        return counterparty
    return _make


@pytest.fixture(scope='function')
def make_product(db_session):
    counter = {"n": 0}

    def _make(name="Ergo-Comfort Keyboard", price="79.99", stock=10, sku=None, **kwargs):
        counter["n"] += 1
        product = Product(
            name=name,
            sku=sku or f"SKU-{counter['n']:04d}",
            price=Decimal(price),
            stock=stock,
            **kwargs,
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def make_wallet(db_session):
    def _make(name="Main Bank Account", balance="5000.00"):
        wallet = Wallet(name=name, balance=Decimal(balance))
        db_session.add(wallet)
        db_session.commit()
        return wallet
    return _make


@pytest.fixture(scope='function')
def client_party(make_counterparty):
    """A counterparty holding only the CLIENT role."""
    return make_counterparty(name="Innovate Inc.", roles=(CounterpartyRole.CLIENT,))


@pytest.fixture(scope='function')
def vendor_party(make_counterparty):
    """A counterparty holding only the VENDOR role."""
    return make_counterparty(name="Office Supplies Co.", roles=(CounterpartyRole.VENDOR,))


@pytest.fixture(scope='function')
def keyboard(make_product):
    return make_product(name="Ergo-Comfort Keyboard", price="79.99", stock=10, sku="KB-4532")


@pytest.fixture(scope='function')
def webcam(make_product):
    return make_product(name="HD Webcam 1080p", price="49.99", stock=20, sku="WC-1080")


@pytest.fixture(scope='function')
def coffee(make_product):
    return make_product(name="Premium Coffee Beans (1kg)", price="22.00", stock=0, sku="CF-001")


@pytest.fixture(scope='function')
def stock_of(db_session):
    """Fresh stock read straight from the database."""
    def _read(product_id: int) -> int:
        return db_session.query(Product.stock).filter_by(id=product_id).scalar()
    return _read


@pytest.fixture(scope='function')
def balance_of(db_session):
    def _read(wallet_id: int) -> Decimal:
        return db_session.query(Wallet.balance).filter_by(id=wallet_id).scalar()
    return _read
