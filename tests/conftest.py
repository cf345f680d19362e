"""Pytest fixtures for storefront tests."""

import os
from datetime import datetime, timedelta, timezone

# Settings are read on first import of app modules.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["PAYMENT_SIMULATED_DELAY_SECONDS"] = "0"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from app.models.product import Product
from app.models.user import User
from app.routers.orders import get_payment_simulator
from app.services.payment_service import PaymentSimulator

USER_A = "user_alice"
USER_B = "user_bob"

SHIPPING = {
    "name": "Alice Kim",
    "phone": "010-1234-5678",
    "address": "12 Teheran-ro, Gangnam-gu",
    "detail": "Apt 301",
    "zip_code": "06236",
}


def make_token(sub: str, email: str | None = None, **claims) -> str:
    payload = {
        "sub": sub,
        "email": email if email is not None else f"{sub}@mail.com",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        **claims,
    }
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def auth_headers(sub: str = USER_A, **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, **claims)}"}


@pytest.fixture
def session():
    """In-memory database shared by the test and the app."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(session):
    """Test client whose requests use the test session and always-pay gateway."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_payment_simulator] = lambda: PaymentSimulator(
        delay_seconds=0, success_rate=1.0
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session):
    """Insert a product and return it."""

    def _make(
        name: str,
        price: int,
        stock_quantity: int = 10,
        category: str = "home",
        is_active: bool = True,
        created_at: datetime | None = None,
    ) -> Product:
        product = Product(
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            category=category,
            is_active=is_active,
        )
        if created_at is not None:
            product.created_at = created_at
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_user(session):
    """Insert a profile row directly (service-level tests bypass auth)."""

    def _make(user_id: str = USER_A) -> User:
        user = User(id=user_id, email=f"{user_id}@mail.com", name=user_id)
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture
def pen_and_mug(make_product):
    return make_product("Pen", 1000), make_product("Mug", 5000)
