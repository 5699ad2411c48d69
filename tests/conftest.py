"""Pytest fixtures for the storefront tests."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

import app.models  # noqa: F401
from app.db.session import build_engine, get_session
from app.models.cart import Cart
from app.models.order import Order
from app.models.product import Product
from app.schemas.order import OrderRequest


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_product(engine):
    """Insert a product and return its id."""
    counter = {"n": 0}

    def _make(name=None, price="10.00", stock=5, **extra):
        counter["n"] += 1
        with Session(engine) as s:
            product = Product(
                name=name or f"Product {counter['n']}",
                price=Decimal(price),
                stock=stock,
                **extra,
            )
            s.add(product)
            s.commit()
            return product.id

    return _make


@pytest.fixture
def order_request():
    def _request(session_id="session-1", email="jane.doe@example.com", **overrides):
        data = dict(
            session_id=session_id,
            customer_name="Jane Doe",
            customer_email=email,
            customer_phone="555-0100",
            shipping_address="742 Evergreen Terrace",
            shipping_city="Springfield",
            shipping_zip="49007",
        )
        data.update(overrides)
        return OrderRequest(**data)

    return _request


@pytest.fixture
def snapshot(engine):
    """Capture stock, carts and orders straight from the database."""

    def _snapshot():
        with Session(engine) as s:
            stock = {p.id: p.stock for p in s.exec(select(Product)).all()}
            carts = {
                c.session_id: (
                    c.total_amount,
                    [(i.product_id, i.quantity, i.unit_price) for i in c.items],
                )
                for c in s.exec(select(Cart)).all()
            }
            orders = len(s.exec(select(Order)).all())
            return {"stock": stock, "carts": carts, "orders": orders}

    return _snapshot


@pytest.fixture
def client(engine):
    """TestClient bound to the test database; lifespan is not run."""
    from app.main import app

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed SQLite for tests that race real connections against each other."""
    engine = build_engine(f"sqlite:///{tmp_path / 'store.db'}", echo=False)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()
