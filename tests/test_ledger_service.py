import random
from datetime import date
from decimal import Decimal

import pytest

from moderna.core.errors import InvalidKindError, NotFoundError, ValidationError
from moderna.modules.ledger import LedgerRepository, LedgerService
from moderna.shared.database.models import Transaction

TODAY = date(2024, 5, 10)


def test_income_posting_updates_ledger(db, ledger):
    service = LedgerService(db)

    service.record("Venta mostrador", Decimal("100.00"), "ingreso", TODAY)

    balance = service.get_balance()
    assert balance["base"] == Decimal("50.00")
    assert balance["income"] == Decimal("100.00")
    assert balance["expense"] == Decimal("0.00")
    assert balance["final"] == Decimal("150.00")


def test_expense_posting_reduces_balance(db, ledger):
    service = LedgerService(db)

    service.record("Pago de luz", Decimal("20.50"), "egreso", TODAY)

    balance = service.get_balance()
    assert balance["expense"] == Decimal("20.50")
    assert balance["final"] == Decimal("29.50")


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_final_balance_does_not_depend_on_posting_order(db, ledger, seed):
    postings = [
        ("ingreso", Decimal("100.00")),
        ("egreso", Decimal("35.25")),
        ("ingreso", Decimal("12.10")),
        ("egreso", Decimal("7.85")),
        ("ingreso", Decimal("0.01")),
    ]
    random.Random(seed).shuffle(postings)
    service = LedgerService(db)

    for kind, amount in postings:
        service.record(f"Movimiento {kind}", amount, kind, TODAY)

    income = sum(amount for kind, amount in postings if kind == "ingreso")
    expense = sum(amount for kind, amount in postings if kind == "egreso")
    balance = service.get_balance()
    assert balance["income"] == income
    assert balance["expense"] == expense
    assert balance["final"] == Decimal("50.00") + income - expense


def test_invalid_kind_is_rejected_before_any_write(db, ledger):
    service = LedgerService(db)

    with pytest.raises(InvalidKindError):
        service.record("Algo", Decimal("10.00"), "transferencia", TODAY)

    assert db.query(Transaction).count() == 0
    assert service.get_balance()["final"] == Decimal("50.00")


def test_ledger_post_rejects_unknown_kind(db, ledger):
    with pytest.raises(InvalidKindError):
        LedgerRepository(db).post("otro", Decimal("1.00"))


@pytest.mark.parametrize("amount", [Decimal("-5.00"), Decimal("0"), "abc", None, Decimal("1.005")])
def test_invalid_amounts_are_rejected(db, ledger, amount):
    with pytest.raises(ValidationError):
        LedgerService(db).record("Movimiento", amount, "ingreso", TODAY)

    assert db.query(Transaction).count() == 0


def test_missing_description_or_date_is_rejected(db, ledger):
    service = LedgerService(db)

    with pytest.raises(ValidationError):
        service.record("   ", Decimal("1.00"), "ingreso", TODAY)
    with pytest.raises(ValidationError):
        service.record("Movimiento", Decimal("1.00"), "ingreso", None)

    assert db.query(Transaction).count() == 0


def test_journal_insert_is_rolled_back_when_posting_fails(db, ledger, monkeypatch):
    def failing_post(self, kind, amount):
        raise RuntimeError("boom")

    monkeypatch.setattr(LedgerRepository, "post", failing_post)
    service = LedgerService(db)

    with pytest.raises(RuntimeError):
        service.record("Venta", Decimal("10.00"), "ingreso", TODAY)

    assert db.query(Transaction).count() == 0
    assert service.get_balance()["final"] == Decimal("50.00")


def test_posting_without_initialized_ledger_leaves_no_transaction(db):
    with pytest.raises(NotFoundError):
        LedgerService(db).record("Venta", Decimal("10.00"), "ingreso", TODAY)

    assert db.query(Transaction).count() == 0


def test_initialize_keeps_existing_ledger(db, ledger):
    service = LedgerService(db)
    service.record("Venta", Decimal("10.00"), "ingreso", TODAY)

    balance = service.initialize(Decimal("999.00"))

    assert balance["base"] == Decimal("50.00")
    assert balance["final"] == Decimal("60.00")


def test_list_transactions_filters_by_kind(db, ledger):
    service = LedgerService(db)
    service.record("Venta", Decimal("10.00"), "ingreso", TODAY)
    service.record("Compra", Decimal("4.00"), "egreso", TODAY)

    expenses = service.list_transactions(kind="egreso")

    assert [t.description for t in expenses] == ["Compra"]
    with pytest.raises(InvalidKindError):
        service.list_transactions(kind="otro")
