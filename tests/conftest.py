"""Pytest fixtures for storefront tests."""

import os

# must be set before storefront.config is imported
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")
os.environ["BREVO_API_KEY"] = ""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.database import create_db_and_tables, get_session
from storefront.dependencies.admin import AdminPolicy
from storefront.models.payment_method import PaymentMethod
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.checkout_schemas import (
    CardDetailsIn,
    CartLineIn,
    CustomerIn,
    PaymentSelectionIn,
    ShippingAddressIn,
)
from storefront.services.checkout_service import place_order
from storefront.utils.token import create_access_token

ADMIN_EMAIL = "boss@example.com"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Customer {counter['n']}",
            "email": f"customer{counter['n']}@example.com",
        }
        data.update(overrides)
        user = User(**data)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Product {counter['n']}",
            "slug": f"product-{counter['n']}",
            "sku": f"SKU-{counter['n']:04d}",
            "price": Decimal("19.99"),
            "stock": 10,
        }
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_payment_method(session):
    def _make(user, **overrides):
        data = {
            "user_id": user.id,
            "label": "Work card",
            "card_holder_name": user.name,
            "brand": "visa",
            "last_four": "4242",
            "expiry_month": 12,
            "expiry_year": 2035,
            "is_default": True,
        }
        data.update(overrides)
        method = PaymentMethod(**data)
        session.add(method)
        session.commit()
        session.refresh(method)
        return method

    return _make


def card_payload(**overrides):
    data = {
        "card_holder_name": "Ada Lovelace",
        "card_number": "4242 4242 4242 4242",
        "cvc": "123",
        "expiry_month": 12,
        "expiry_year": 2035,
    }
    data.update(overrides)
    return data


def checkout_payload(items, *, payment=None, **overrides):
    data = {
        "customer": {
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "+43 660 1234567",
        },
        "shipping_address": {
            "line1": "Hauptstrasse 1",
            "line2": "",
            "city": "Vienna",
            "postal_code": "1010",
            "country": "Austria",
        },
        "items": items,
        "payment": payment if payment is not None else {"card": card_payload()},
        "accepted": True,
    }
    data.update(overrides)
    return data


@pytest.fixture
def checkout(session):
    """Place an order through the service with sensible defaults."""

    def _checkout(lines, *, user=None, payment=None, customer=None, shipping_address=None):
        return place_order(
            session,
            customer=customer or CustomerIn(full_name="Ada Lovelace", email="ada@example.com"),
            shipping_address=shipping_address or ShippingAddressIn(
                line1="Hauptstrasse 1",
                city="Vienna",
                postal_code="1010",
                country="Austria",
            ),
            cart_lines=[
                line if isinstance(line, CartLineIn) else CartLineIn(**line)
                for line in lines
            ],
            payment=payment or PaymentSelectionIn(card=CardDetailsIn(**card_payload())),
            user=user,
        )

    return _checkout


@pytest.fixture
def client(session):
    from storefront.main import app

    app.dependency_overrides[get_session] = lambda: session
    previous_policy = app.state.admin_policy
    app.state.admin_policy = AdminPolicy(admin_emails=frozenset({ADMIN_EMAIL}))

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.admin_policy = previous_policy


def auth_headers(user):
    token = create_access_token({"user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def payload():
    """Builder for JSON checkout bodies."""
    return checkout_payload


@pytest.fixture
def headers():
    """Builder for bearer auth headers."""
    return auth_headers


@pytest.fixture
def card():
    """Builder for fresh card fields."""
    return card_payload


@pytest.fixture
def admin(make_user):
    """A back-office user admitted through the admin email list."""
    return make_user(name="Boss", email=ADMIN_EMAIL)
