from datetime import datetime, timezone
from decimal import Decimal
from flask import current_app
from ..extensions import db
from ..errors import (
    ConflictingCouponError,
    CouponAlreadyAppliedError,
    EmptyCartError,
    InsufficientStockError,
    InvalidInputError,
    InvalidOrExpiredCouponError,
    InvalidQuantityError,
    MinimumCartValueNotMetError,
    NotFoundError,
    UnavailableError,
)
from ..model import Cart, CartItem
from ..repositories import carts, coupons, products
from ..utils.money import D, round_money

TAX_RATE = Decimal("0.18")  # 18% GST


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _coerce_quantity(value, minimum: int) -> int:
    # bool is an int subclass; reject it along with floats like 1.5
    if isinstance(value, bool):
        raise InvalidQuantityError("Quantity must be a whole number")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidQuantityError("Quantity must be a whole number")
    if value < minimum:
        if minimum == 0:
            raise InvalidQuantityError("Quantity cannot be less than 0")
        raise InvalidQuantityError(f"Quantity must be at least {minimum}")
    return value


def _require_cart(owner_id) -> Cart:
    cart = carts.find_by_owner(owner_id)
    if cart is None:
        raise NotFoundError("Cart not found")
    return cart


def _sellable_product(product_id):
    product = products.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if not product.is_active:
        raise UnavailableError("Product is not available")
    return product


def recalc_cart(cart: Cart) -> Cart:
    """
    Recompute cached totals from the current lines and coupon.

    Order:
      1) an empty cart drops its coupon
      2) subtotal from line price snapshots
      3) tax on subtotal
      4) discount from the coupon's current record; a coupon that has been
         deactivated or deleted is detached
      5) total = subtotal + tax - discount
    """
    if not cart.items:
        cart.coupon = None
        cart.coupon_id = None

    subtotal = cart.items_subtotal_dec()
    tax = round_money(subtotal * TAX_RATE)

    discount = D(0)
    coupon = cart.coupon
    if coupon is not None and coupon.is_active:
        discount = round_money(subtotal * D(coupon.discount_percentage) / D(100))
    elif cart.coupon_id is not None or coupon is not None:
        current_app.logger.info("detaching inactive coupon from cart %s", cart.id)
        cart.coupon = None
        cart.coupon_id = None

    cart.subtotal = subtotal
    cart.tax = tax
    cart.discount = discount
    cart.total = round_money(subtotal + tax - discount)
    return cart


def reset_cart(cart: Cart) -> Cart:
    """Empty the cart in place; the row is reused."""
    cart.items.clear()
    cart.coupon = None
    cart.coupon_id = None
    cart.subtotal = D(0)
    cart.tax = D(0)
    cart.discount = D(0)
    cart.total = D(0)
    return cart


def _commit(cart: Cart) -> Cart:
    recalc_cart(cart)
    carts.save(cart)
    db.session.commit()
    return cart


# ---- operations ------------------------------------------------------------

def get_cart(owner_id) -> Cart:
    cart = carts.get_by_owner(owner_id)
    db.session.commit()
    return cart


def add_item(owner_id, product_id, quantity=1) -> Cart:
    quantity = _coerce_quantity(quantity, minimum=1)
    product = _sellable_product(product_id)
    if product.stock < quantity:
        raise InsufficientStockError(product.stock, product.id)

    cart = carts.get_by_owner(owner_id)
    item = cart.find_item(product.id)
    if item:
        item.quantity += quantity
        item.unit_price = D(product.price)
    else:
        cart.items.append(CartItem(
            product_id=product.id,
            quantity=quantity,
            unit_price=D(product.price),
        ))
    return _commit(cart)


def update_item(owner_id, product_id, quantity) -> Cart:
    """quantity == 0 removes the line."""
    quantity = _coerce_quantity(quantity, minimum=0)
    cart = _require_cart(owner_id)
    item = cart.find_item(product_id)
    if not item:
        raise NotFoundError("Item not found in cart")

    if quantity == 0:
        cart.items.remove(item)
        return _commit(cart)

    product = products.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if product.stock < quantity:
        raise InsufficientStockError(product.stock, product.id)

    item.quantity = quantity
    item.unit_price = D(product.price)
    return _commit(cart)


def remove_item(owner_id, product_id) -> Cart:
    cart = _require_cart(owner_id)
    item = cart.find_item(product_id)
    if not item:
        raise NotFoundError("Item not found in cart")
    cart.items.remove(item)
    return _commit(cart)


def apply_coupon(owner_id, code) -> Cart:
    if not isinstance(code, str) or not code.strip():
        raise InvalidInputError("Please provide a valid coupon code")
    code = code.strip().upper()

    cart = _require_cart(owner_id)
    if not cart.items:
        raise EmptyCartError()

    if cart.coupon is not None:
        if cart.coupon.code == code:
            raise CouponAlreadyAppliedError(code)
        raise ConflictingCouponError(cart.coupon.code)

    coupon = coupons.find_active_by_code(code, _utcnow())
    if coupon is None:
        raise InvalidOrExpiredCouponError()

    # gate on the freshly computed subtotal, not a stale cached one
    if cart.items_subtotal_dec() < D(coupon.minimum_cart_value):
        raise MinimumCartValueNotMetError(D(coupon.minimum_cart_value))

    cart.coupon = coupon
    cart.coupon_id = coupon.id
    return _commit(cart)


def remove_coupon(owner_id) -> Cart:
    cart = _require_cart(owner_id)
    cart.coupon = None
    cart.coupon_id = None
    return _commit(cart)


def purge_product(product_id) -> int:
    """Drop a product's lines from every cart. Caller commits."""
    affected = carts.with_product(product_id)
    for cart in affected:
        item = cart.find_item(product_id)
        if item:
            cart.items.remove(item)
        recalc_cart(cart)
    return len(affected)


def detach_coupon_everywhere(coupon_id) -> int:
    """Detach a coupon from every cart holding it. Caller commits."""
    affected = carts.with_coupon(coupon_id)
    for cart in affected:
        cart.coupon = None
        cart.coupon_id = None
        recalc_cart(cart)
    return len(affected)
