# storefront/cart/routes.py
from __future__ import annotations
from flask import request

from ..errors import InvalidInputError
from ..services import cart_service
from ..utils.api import ok
from ..utils.decorators import current_owner_id, customer_required
from . import bp

# ---- helpers ---------------------------------------------------------------

# ids are stored as signed 64-bit integers
MAX_ID = 2**63 - 1

def _product_id(data: dict) -> int:
    raw = data.get("product_id", data.get("productId"))
    if isinstance(raw, bool):
        raw = None
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError("product_id is required")
    if not -MAX_ID - 1 <= value <= MAX_ID:
        raise InvalidInputError("product_id is out of range")
    return value

def _quantity(data: dict, default=None):
    if "quantity" in data:
        return data["quantity"]
    if "qty" in data:
        return data["qty"]
    if default is None:
        raise InvalidInputError("quantity is required")
    return default

# ---- endpoints -------------------------------------------------------------

@bp.get("")
@customer_required
def get_cart():
    cart = cart_service.get_cart(current_owner_id())
    return ok("cart", {"cart": cart.as_api()})

@bp.post("")
@customer_required
def add_item():
    """
    Body: { "product_id": int, "quantity" | "qty": int (default 1) }
    """
    data = request.get_json(silent=True) or {}
    cart = cart_service.add_item(current_owner_id(), _product_id(data), _quantity(data, default=1))
    return ok("Item added to cart", {"cart": cart.as_api()})

@bp.put("")
@customer_required
def update_item():
    """
    Body: { "product_id": int, "quantity": int }
    quantity 0 removes the line.
    """
    data = request.get_json(silent=True) or {}
    cart = cart_service.update_item(current_owner_id(), _product_id(data), _quantity(data))
    return ok("Cart updated successfully", {"cart": cart.as_api()})

@bp.delete("/<int:product_id>")
@customer_required
def remove_item(product_id: int):
    cart = cart_service.remove_item(current_owner_id(), product_id)
    return ok("Item removed from cart", {"cart": cart.as_api()})

@bp.post("/coupon")
@customer_required
def apply_coupon():
    """
    Body: { "code": "SUMMER10" }
    One coupon per cart; remove the current one before applying another.
    """
    data = request.get_json(silent=True) or {}
    cart = cart_service.apply_coupon(current_owner_id(), data.get("code"))
    return ok("Coupon applied successfully", {"cart": cart.as_api()})

@bp.delete("/coupon")
@customer_required
def remove_coupon():
    cart = cart_service.remove_coupon(current_owner_id())
    return ok("Coupon removed successfully", {"cart": cart.as_api()})
