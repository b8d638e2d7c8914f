from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from moderna.config.database import Base
from moderna.main import initialize_ledger


def test_initialize_ledger_creates_the_balance(session_factory):
    balance = initialize_ledger(session_factory, Decimal("75.00"))

    assert balance["base"] == Decimal("75.00")
    assert balance["final"] == Decimal("75.00")


def test_missing_schema_is_reported_as_such(tmp_path, caplog):
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    with pytest.raises(RuntimeError, match="Esquema de base de datos no inicializado"):
        initialize_ledger(factory, Decimal("0.00"))

    assert "falta la tabla 'ledger'" in caplog.text
    engine.dispose()


def test_timestamp_columns_are_naive_like_the_clock():
    datetime_columns = [
        column
        for table in Base.metadata.tables.values()
        for column in table.columns
        if column.type.__class__.__name__ == "DateTime"
    ]

    assert datetime_columns
    assert all(column.type.timezone is False for column in datetime_columns)
