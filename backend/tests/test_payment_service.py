# Overview: Pytest coverage for payment processing and wallet balance updates.

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from bizops.models import Payment
from bizops.services import payment_service
from bizops.services.errors import StorageError, ValidationError
from bizops.services.payment_service import (
    PAYMENT_STATUS_RECEIVED,
    PAYMENT_STATUS_SENT,
    PAYMENT_TYPE_BANK_TRANSFER,
    PAYMENT_TYPE_CASH,
    create_payment,
    record_expense,
    record_income,
)


class TestCreatePayment:

    def test_income_increments_balance(self, db_session, client_party, make_wallet, balance_of):
        wallet = make_wallet(balance="5000.00")

        result = create_payment(
            Decimal("3080.00"), PAYMENT_TYPE_BANK_TRANSFER, PAYMENT_STATUS_RECEIVED,
            "Payment for INV-2026-0001", client_party.id, wallet.id,
        )

        assert result.ok, result.message
        assert result.value.amount == Decimal("3080.00")
        assert result.value.date is not None
        assert balance_of(wallet.id) == Decimal("8080.00")

    def test_expense_decrements_balance(self, db_session, vendor_party, make_wallet, balance_of):
        wallet = make_wallet(name="Cash Drawer", balance="100.00")

        result = create_payment(
            "-150.75", PAYMENT_TYPE_CASH, PAYMENT_STATUS_SENT,
            "Office Supplies Purchase", vendor_party.id, wallet.id,
        )

        assert result.ok, result.message
        assert balance_of(wallet.id) == Decimal("-50.75")

    def test_signed_amount_is_trusted_over_status(self, db_session, client_party, make_wallet, balance_of):
        wallet = make_wallet(balance="10.00")

        result = create_payment("-5.00", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id)

        assert result.ok
        assert balance_of(wallet.id) == Decimal("5.00")

    def test_balances_accumulate(self, db_session, client_party, make_wallet, balance_of):
        wallet = make_wallet(balance="0")

        for amount in ("10.10", "20.20", "-5.05"):
            assert create_payment(amount, PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id).ok

        assert balance_of(wallet.id) == Decimal("25.25")
        assert db_session.query(Payment).count() == 3

    def test_unknown_wallet(self, db_session, client_party):
        result = create_payment("10.00", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, 999)

        assert isinstance(result.error, ValidationError)
        assert db_session.query(Payment).count() == 0

    def test_unknown_counterparty(self, db_session, make_wallet, balance_of):
        wallet = make_wallet(balance="1.00")

        result = create_payment("10.00", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, 999, wallet.id)

        assert isinstance(result.error, ValidationError)
        assert balance_of(wallet.id) == Decimal("1.00")

    @pytest.mark.parametrize("amount", ["0", "0.00", "abc", "0.00001", "12.34567", "1e12"])
    def test_bad_amount(self, db_session, client_party, make_wallet, amount):
        wallet = make_wallet()

        result = create_payment(amount, PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id)

        assert isinstance(result.error, ValidationError)

    def test_bad_type_and_status(self, db_session, client_party, make_wallet):
        wallet = make_wallet()

        assert isinstance(
            create_payment("1", "Barter", PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id).error,
            ValidationError,
        )
        assert isinstance(
            create_payment("1", PAYMENT_TYPE_CASH, "Pending", None, client_party.id, wallet.id).error,
            ValidationError,
        )

    def test_failed_balance_update_leaves_no_payment(
        self, db_session, client_party, make_wallet, balance_of, monkeypatch
    ):
        wallet = make_wallet(balance="100.00")
        real_execute = db_session.execute

        def flaky_execute(statement, *args, **kwargs):
            if getattr(statement, "is_dml", False) and "wallets" in str(statement):
                raise OperationalError(str(statement), {}, Exception("database is locked"))
            return real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db_session, "execute", flaky_execute)

        result = create_payment("25.00", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id)

        monkeypatch.undo()
        assert isinstance(result.error, StorageError)
        assert db_session.query(Payment).count() == 0
        assert balance_of(wallet.id) == Decimal("100.00")


class TestIncomeExpenseHelpers:

    def test_record_income_is_positive(self, db_session, client_party, make_wallet, balance_of):
        wallet = make_wallet(balance="0")

        result = record_income("-40", PAYMENT_TYPE_CASH, "Consulting Fee", client_party.id, wallet.id)

        assert result.value.amount == Decimal("40")
        assert result.value.status == PAYMENT_STATUS_RECEIVED
        assert balance_of(wallet.id) == Decimal("40")

    def test_record_expense_is_negative(self, db_session, vendor_party, make_wallet, balance_of):
        wallet = make_wallet(balance="0")

        result = record_expense("40", PAYMENT_TYPE_CASH, "Paper", vendor_party.id, wallet.id)

        assert result.value.amount == Decimal("-40")
        assert result.value.status == PAYMENT_STATUS_SENT
        assert balance_of(wallet.id) == Decimal("-40")

    def test_list_payments_by_wallet(self, db_session, client_party, make_wallet):
        bank = make_wallet(name="Main Bank Account")
        drawer = make_wallet(name="Cash Drawer")
        record_income("1", PAYMENT_TYPE_CASH, None, client_party.id, bank.id)
        record_income("2", PAYMENT_TYPE_CASH, None, client_party.id, drawer.id)

        assert [p.wallet_id for p in payment_service.list_payments(wallet_id=drawer.id)] == [drawer.id]
        assert len(payment_service.list_payments()) == 2
        assert [w.name for w in payment_service.list_wallets()] == ["Cash Drawer", "Main Bank Account"]


def test_sub_scale_amount_leaves_no_row(db_session, client_party, make_wallet, balance_of):
    wallet = make_wallet(balance="10.00")

    result = create_payment("0.00001", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id)

    assert isinstance(result.error, ValidationError)
    assert db_session.query(Payment).count() == 0
    assert balance_of(wallet.id) == Decimal("10.00")


def test_four_decimal_amount_is_kept_exactly(db_session, client_party, make_wallet, balance_of):
    wallet = make_wallet(balance="0")

    result = create_payment("87.989", PAYMENT_TYPE_CASH, PAYMENT_STATUS_RECEIVED, None, client_party.id, wallet.id)

    assert result.ok, result.message
    assert balance_of(wallet.id) == Decimal("87.989")
