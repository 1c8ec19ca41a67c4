from flask import current_app
from ..extensions import db
from ..errors import InvalidInputError, NotFoundError
from ..model import Product
from ..repositories import products
from ..utils.fields import UNSET, is_set, pick
from ..utils.money import parse_money
from .cart_service import purge_product

_TEXT_FIELDS = ("name", "description", "category", "image")


def _text(data, key, required):
    raw = pick(data, key)
    if not is_set(raw):
        if required:
            raise InvalidInputError(f"{key} is required")
        return UNSET
    if not isinstance(raw, str) or (required and not raw.strip()):
        raise InvalidInputError(f"{key} must be a non-empty string")
    return raw.strip()

def _price(data, required):
    raw = pick(data, "price")
    if not is_set(raw):
        if required:
            raise InvalidInputError("price is required")
        return UNSET
    value = parse_money(raw)
    if value is None or value < 0:
        raise InvalidInputError("price must be a number >= 0")
    return value

def _stock(data):
    raw = pick(data, "stock")
    if not is_set(raw):
        return UNSET
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise InvalidInputError("stock must be a whole number >= 0")
    return raw

def _flag(data, key):
    raw = pick(data, key)
    if is_set(raw) and not isinstance(raw, bool):
        raise InvalidInputError(f"{key} must be true or false")
    return raw


def _parse(data: dict, required: bool) -> dict:
    fields = {key: _text(data, key, required) for key in _TEXT_FIELDS}
    fields["price"] = _price(data, required)
    fields["stock"] = _stock(data)
    fields["is_active"] = _flag(data, "is_active")
    return {k: v for k, v in fields.items() if is_set(v)}


# ---- customer-facing ------------------------------------------------------

def list_products(category=None, min_price=None, max_price=None) -> list[Product]:
    return products.list_available(category=category, min_price=min_price, max_price=max_price)


def get_product(product_id) -> Product:
    p = products.get(product_id)
    if p is None or not p.is_active:
        raise NotFoundError("Product not found")
    return p


def list_categories() -> list[str]:
    return products.categories()


# ---- admin ----------------------------------------------------------------

def list_all_products() -> list[Product]:
    return products.list_all()


def create_product(data: dict) -> Product:
    fields = _parse(data, required=True)
    fields.setdefault("stock", 0)
    fields.setdefault("is_active", True)
    p = products.add(Product(**fields))
    db.session.commit()
    current_app.logger.info("product %s created: %s", p.id, p.name)
    return p


def update_product(product_id, data: dict) -> Product:
    p = products.get(product_id)
    if p is None:
        raise NotFoundError("Product not found")
    for key, value in _parse(data, required=False).items():
        if key in _TEXT_FIELDS and not value:
            raise InvalidInputError(f"{key} must be a non-empty string")
        setattr(p, key, value)
    db.session.commit()
    current_app.logger.info("product %s updated", p.id)
    return p


def delete_product(product_id) -> None:
    p = products.get(product_id)
    if p is None:
        raise NotFoundError("Product not found")
    purged = purge_product(p.id)
    products.delete(p)
    db.session.commit()
    current_app.logger.info("product %s deleted, removed from %d carts", product_id, purged)
