from decimal import Decimal

import pytest

from storefront.errors import InvalidInputError, NotFoundError
from storefront.extensions import db
from storefront.model import CartItem, Product
from storefront.services import cart_service, product_service


def new_product(**overrides):
    data = {
        "name": "Sunscreen SPF 50",
        "description": "Broad spectrum",
        "price": "349.50",
        "stock": 12,
        "category": "skincare",
        "image": "/img/sunscreen.jpg",
    }
    data.update(overrides)
    return data


class TestCatalog:
    def test_lists_only_active_in_stock(self, make_product):
        visible = make_product(name="Visible", stock=3)
        make_product(name="Hidden", is_active=False)
        make_product(name="Sold Out", stock=0)

        assert [p.id for p in product_service.list_products()] == [visible.id]

    def test_filters(self, make_product):
        cheap = make_product(name="Cheap", price="50", category="hair")
        make_product(name="Mid", price="150", category="hair")
        make_product(name="Other", price="60", category="skincare")

        result = product_service.list_products(category="hair", max_price=Decimal("100"))
        assert [p.id for p in result] == [cheap.id]

        result = product_service.list_products(min_price=Decimal("100"))
        assert [p.name for p in result] == ["Mid"]

    def test_inactive_product_is_not_found(self, make_product):
        p = make_product(is_active=False)
        with pytest.raises(NotFoundError):
            product_service.get_product(p.id)

    def test_categories_are_distinct_and_sorted(self, make_product):
        make_product(name="A", category="skincare")
        make_product(name="B", category="hair")
        make_product(name="C", category="hair")
        make_product(name="D", category="retired", is_active=False)

        assert product_service.list_categories() == ["hair", "skincare"]


class TestCreateProduct:
    def test_defaults(self, app):
        data = new_product()
        del data["stock"]

        p = product_service.create_product(data)

        assert p.id is not None
        assert p.price == Decimal("349.50")
        assert p.stock == 0
        assert p.is_active is True

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"price": -1},
        {"price": "free"},
        {"stock": -2},
        {"stock": 1.5},
        {"is_active": "no"},
    ])
    def test_rejects_invalid(self, app, overrides):
        with pytest.raises(InvalidInputError):
            product_service.create_product(new_product(**overrides))

    def test_missing_required(self, app):
        data = new_product()
        del data["category"]
        with pytest.raises(InvalidInputError):
            product_service.create_product(data)


class TestUpdateProduct:
    def test_zero_and_false_are_applied(self, make_product):
        p = make_product(price="100", stock=9)

        updated = product_service.update_product(p.id, {"stock": 0, "is_active": False})

        assert updated.stock == 0
        assert updated.is_active is False
        assert updated.price == Decimal("100")
        assert updated.name == "Face Wash"

    def test_free_price_is_applied(self, make_product):
        p = make_product(price="100")
        assert product_service.update_product(p.id, {"price": 0}).price == Decimal("0")

    def test_empty_body_changes_nothing(self, make_product):
        p = make_product(price="100", stock=9)
        updated = product_service.update_product(p.id, {})
        assert (updated.price, updated.stock, updated.is_active) == (Decimal("100"), 9, True)

    def test_blank_name(self, make_product):
        p = make_product()
        with pytest.raises(InvalidInputError):
            product_service.update_product(p.id, {"name": "  "})

    def test_unknown(self, app):
        with pytest.raises(NotFoundError):
            product_service.update_product(404, {"stock": 1})


class TestDeleteProduct:
    def test_purges_carts(self, make_customer, make_product):
        a, b = make_customer(), make_customer()
        gone = make_product(name="Gone", price="100")
        kept = make_product(name="Kept", price="10")
        cart_service.add_item(a.id, gone.id, 1)
        cart_service.add_item(a.id, kept.id, 1)
        cart_service.add_item(b.id, gone.id, 2)

        product_service.delete_product(gone.id)

        assert db.session.get(Product, gone.id) is None
        assert db.session.query(CartItem).filter_by(product_id=gone.id).count() == 0
        cart_a = cart_service.get_cart(a.id)
        assert [i.product_id for i in cart_a.items] == [kept.id]
        assert cart_a.subtotal == Decimal("10")
        assert cart_service.get_cart(b.id).total == Decimal("0")

    def test_unknown(self, app):
        with pytest.raises(NotFoundError):
            product_service.delete_product(404)
