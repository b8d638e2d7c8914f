from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from moderna.config.database import Base, get_db
from moderna.main import app
from moderna.modules.ledger import LedgerService
from moderna.shared.database.models import Product


@pytest.fixture
def engine(tmp_path: Path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'moderna_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def ledger(db):
    return LedgerService(db).initialize(Decimal("50.00"))


@pytest.fixture
def make_product(db):
    def _make(stock: int, unit_price: str = "5.00", product_id: int | None = None, name: str | None = None) -> int:
        product = Product(
            id=product_id,
            name=name or f"Producto {product_id or ''}".strip(),
            stock=stock,
            unit_price=Decimal(unit_price),
        )
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture
def stock_of(session_factory):
    """Leer el stock con una sesión nueva, fuera de la sesión bajo prueba"""

    def _stock(product_id: int) -> int:
        with session_factory() as session:
            return session.get(Product, product_id).stock

    return _stock


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
