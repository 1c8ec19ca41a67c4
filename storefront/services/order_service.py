from __future__ import annotations
from flask import current_app
from ..extensions import db
from ..errors import (
    AlreadyCancelledError,
    AlreadyDeliveredError,
    EmptyCartError,
    InsufficientStockError,
    InvalidInputError,
    InvalidStatusTransitionError,
    NotFoundError,
    UnavailableError,
)
from ..model import Order, OrderItem, OrderStatus
from ..model.order import FULFILMENT_TRACK
from ..repositories import carts, coupons, orders, products, users
from .cart_service import recalc_cart, reset_cart


def _live_products(cart):
    """Re-check every line against live catalog stock; the add-time check may be stale."""
    pmap = {}
    for it in cart.items:
        p = products.get(it.product_id)
        if p is None:
            raise NotFoundError(f"Product {it.product_id} not found")
        db.session.refresh(p)
        if not p.is_active:
            raise UnavailableError(f"{p.name} is not available")
        if p.stock < it.quantity:
            raise InsufficientStockError(p.stock, p.id, p.name)
        pmap[p.id] = p
    return pmap


def place_order(owner_id) -> Order:
    cart = carts.find_by_owner(owner_id)
    if cart is None:
        raise NotFoundError("Cart not found")
    if not cart.items:
        raise EmptyCartError()

    pmap = _live_products(cart)
    user = users.get(owner_id)
    if user is None:
        raise NotFoundError("User not found")

    try:
        # refresh coupon validity before the totals are frozen
        recalc_cart(cart)

        order = Order(
            user_id=owner_id,
            status=OrderStatus.PLACED.value,
            coupon_id=cart.coupon.id if cart.coupon else None,
            coupon_code=cart.coupon.code if cart.coupon else None,
            subtotal=cart.subtotal,
            discount=cart.discount,
            tax=cart.tax,
            total=cart.total,
            shipping_address=user.address,
            items=[
                OrderItem(
                    product_id=it.product_id,
                    name=pmap[it.product_id].name,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                )
                for it in cart.items
            ],
        )
        orders.create(order)

        # Decrement stock; raises if a concurrent order got there first
        for it in cart.items:
            products.adjust_stock(it.product_id, -it.quantity)

        if order.coupon_id is not None:
            coupons.increment_usage(order.coupon_id)

        reset_cart(cart)
        carts.save(cart)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        "order %s placed by user %s: %d lines, total %s",
        order.id, owner_id, len(order.items), order.total,
    )
    return order


def get_order_history(owner_id) -> list[Order]:
    return orders.list_by_owner(owner_id, newest_first=True)


def get_order_details(owner_id, order_id) -> Order:
    order = orders.find_by_owner_and_id(owner_id, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def _restore_stock(order: Order) -> None:
    for it in order.items:
        if products.get(it.product_id) is None:
            current_app.logger.warning(
                "order %s: product %s no longer exists, %d units not restocked",
                order.id, it.product_id, it.quantity,
            )
            continue
        products.adjust_stock(it.product_id, it.quantity)


def _cancel(order: Order) -> Order:
    try:
        order.status = OrderStatus.CANCELLED.value
        _restore_stock(order)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info("order %s cancelled", order.id)
    return order


def cancel_order(owner_id, order_id) -> Order:
    """Coupon usage is not reversed; usage counters only grow."""
    order = get_order_details(owner_id, order_id)
    if order.status == OrderStatus.DELIVERED.value:
        raise AlreadyDeliveredError()
    if order.status == OrderStatus.CANCELLED.value:
        raise AlreadyCancelledError()
    return _cancel(order)


# ---- admin -----------------------------------------------------------------

def list_all_orders() -> list[Order]:
    return orders.list_all()


def _parse_status(value) -> OrderStatus:
    if isinstance(value, str):
        for s in OrderStatus:
            if value.strip().lower() in (s.value.lower(), s.name.lower()):
                return s
    allowed = ", ".join(s.value for s in OrderStatus)
    raise InvalidInputError(f"status must be one of: {allowed}")


def update_order_status(order_id, status) -> Order:
    """
    Forward-only along Order Placed -> Packed -> Shipping -> Delivered
    (skipping ahead is allowed). Cancelled is reachable from any non-terminal
    status and restocks the order's lines.
    """
    requested = _parse_status(status)
    order = orders.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")

    current = order.status_enum
    if current.is_terminal or requested == current:
        raise InvalidStatusTransitionError(current.value, requested.value)

    if requested == OrderStatus.CANCELLED:
        return _cancel(order)

    if FULFILMENT_TRACK.index(requested) < FULFILMENT_TRACK.index(current):
        raise InvalidStatusTransitionError(current.value, requested.value)

    order.status = requested.value
    db.session.commit()
    current_app.logger.info("order %s: %s -> %s", order.id, current.value, requested.value)
    return order
