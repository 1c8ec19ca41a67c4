# ------ storefront/model/__init__.py ------

from .user import User
from .product import Product
from .coupon import Coupon
from .cart import Cart, CartItem
from .order import Order, OrderItem, OrderStatus

__all__ = [
    "User",
    "Product",
    "Coupon",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
]
