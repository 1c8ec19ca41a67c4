from datetime import date

import pytest
from flask_jwt_extended import decode_token

from storefront.errors import ConflictError, InvalidInputError, UnauthorizedError
from storefront.extensions import db
from storefront.model import Cart, User
from storefront.repositories import users
from storefront.services import account_service

PASSWORD = "Secret@123"


def registration(**overrides):
    data = {
        "name": "Ravi Kumar",
        "address": "5 Park Lane, Mumbai",
        "mobile_number": "9123456780",
        "date_of_birth": "1992-08-30",
        "email": "Ravi@Example.com",
        "password": PASSWORD,
    }
    data.update(overrides)
    return data


class TestRegister:
    def test_creates_user_with_empty_cart(self, app):
        user = account_service.register_customer(registration())

        assert user.role == "customer"
        assert user.email == "ravi@example.com"
        assert user.date_of_birth == date(1992, 8, 30)
        assert user.password_hash != PASSWORD

        cart = db.session.query(Cart).filter_by(user_id=user.id).one()
        assert cart.items == []
        assert cart.total == 0

    def test_duplicate_mobile(self, app):
        account_service.register_customer(registration())
        with pytest.raises(ConflictError):
            account_service.register_customer(registration(email="other@example.com"))
        assert db.session.query(User).count() == 1

    @pytest.mark.parametrize("overrides", [
        {"password": "weakpass"},
        {"password": "NoSymbol123"},
        {"mobile_number": "12345"},
        {"email": "not-an-email"},
        {"date_of_birth": "30/08/1992"},
        {"name": "   "},
    ])
    def test_rejects_invalid(self, app, overrides):
        with pytest.raises(InvalidInputError):
            account_service.register_customer(registration(**overrides))


class TestAuthenticate:
    def test_token_carries_identity_and_role(self, customer):
        user = account_service.authenticate(customer.mobile_number, PASSWORD, role="customer")
        claims = decode_token(account_service.issue_token(user))

        assert claims["sub"] == str(customer.id)
        assert claims["role"] == "customer"

    def test_wrong_password(self, customer):
        with pytest.raises(UnauthorizedError):
            account_service.authenticate(customer.mobile_number, "Wrong@1234", role="customer")

    def test_role_is_part_of_the_lookup(self, customer):
        with pytest.raises(UnauthorizedError):
            account_service.authenticate(customer.mobile_number, PASSWORD, role="admin")

    def test_missing_fields(self, app):
        with pytest.raises(InvalidInputError):
            account_service.authenticate(None, None, role="customer")


class TestProfile:
    def test_partial_update(self, customer):
        updated = account_service.update_profile(customer.id, {"address": "New Street 9"})
        assert updated.address == "New Street 9"
        assert updated.name == "Jane Doe"

    def test_email_can_be_cleared(self, customer):
        assert account_service.update_profile(customer.id, {"email": None}).email is None

    def test_blank_name(self, customer):
        with pytest.raises(InvalidInputError):
            account_service.update_profile(customer.id, {"name": ""})


class TestEnsureAdmin:
    def test_is_idempotent(self, app):
        first, created = account_service.ensure_admin(
            users, name="Admin", mobile_number="9999999999", password="Admin@123",
        )
        second, created_again = account_service.ensure_admin(
            users, name="Other", mobile_number="8888888888", password="Other@123",
        )

        assert created is True
        assert created_again is False
        assert second.id == first.id
        assert db.session.query(User).filter_by(role="admin").count() == 1

    def test_admin_can_log_in(self, app):
        account_service.ensure_admin_from_config(app.config)
        admin = account_service.authenticate(
            app.config["ADMIN_MOBILE_NUMBER"], app.config["ADMIN_PASSWORD"], role="admin",
        )
        assert admin.role == "admin"

    def test_admin_and_customer_may_share_a_mobile(self, customer):
        admin, created = account_service.ensure_admin(
            users, name="Admin", mobile_number=customer.mobile_number, password="Admin@123",
        )
        assert created is True
        assert admin.id != customer.id
