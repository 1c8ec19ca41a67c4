"""Pytest fixtures for storefront tests."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront import create_app
from storefront.config import TestingConfig
from storefront.extensions import db
from storefront.model import Coupon, Product, User
from storefront.services import account_service

PASSWORD = "Secret@123"


@pytest.fixture
def app():
    """App bound to a fresh in-memory database, with an app context pushed."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_customer(app):
    counter = {"n": 0}

    def _make(address="12 Main Street, Pune", name="Jane Doe"):
        counter["n"] += 1
        return account_service.register_customer({
            "name": name,
            "address": address,
            "mobile_number": f"98765{counter['n']:05d}",
            "date_of_birth": "1995-04-12",
            "email": f"jane{counter['n']}@example.com",
            "password": PASSWORD,
        })

    return _make


@pytest.fixture
def customer(make_customer):
    return make_customer()


@pytest.fixture
def cartless_user(app):
    """A user row with no cart, for the cart-not-found paths."""
    user = User(
        name="No Cart",
        address="nowhere",
        mobile_number="9000000001",
        date_of_birth=date(1990, 1, 1),
        password_hash="x",
        role="customer",
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def make_product(app):
    def _make(price="100", stock=5, name="Face Wash", category="skincare", is_active=True):
        p = Product(
            name=name,
            description=f"{name} description",
            price=Decimal(str(price)),
            stock=stock,
            category=category,
            image=f"/img/{name.lower().replace(' ', '-')}.jpg",
            is_active=is_active,
        )
        db.session.add(p)
        db.session.commit()
        return p

    return _make


@pytest.fixture
def make_coupon(app):
    def _make(code="SAVE10", percentage="10", minimum="150", starts_in_days=-1,
              ends_in_days=30, is_active=True):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        c = Coupon(
            code=code,
            discount_percentage=Decimal(str(percentage)),
            minimum_cart_value=Decimal(str(minimum)),
            start_date=now + timedelta(days=starts_in_days),
            end_date=now + timedelta(days=ends_in_days),
            is_active=is_active,
            usage_count=0,
        )
        db.session.add(c)
        db.session.commit()
        return c

    return _make
