"""Persistence access for the cart and order engines.

Repositories never commit; the calling service owns the transaction.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update

from .errors import InsufficientStockError, NotFoundError
from .extensions import db
from .model import Cart, CartItem, Coupon, Order, Product, User


class ProductRepository:

    def get(self, product_id) -> Optional[Product]:
        return db.session.get(Product, product_id)

    def adjust_stock(self, product_id, delta: int) -> None:
        """
        Atomically apply `delta` to the stored stock.

        The guard lives in the UPDATE itself so concurrent orders against the
        same product cannot drive stock below zero.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock + delta >= 0)
            .values(stock=Product.stock + delta)
            .execution_options(synchronize_session="fetch")
        )
        result = db.session.execute(stmt)
        if result.rowcount == 1:
            return

        product = self.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        db.session.refresh(product)
        raise InsufficientStockError(product.stock, product.id, product.name)

    def list_available(self, category=None, min_price=None, max_price=None) -> list[Product]:
        stmt = select(Product).where(Product.is_active.is_(True), Product.stock > 0)
        if category:
            stmt = stmt.where(Product.category == category)
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        return list(db.session.scalars(stmt.order_by(Product.id.asc())))

    def list_all(self) -> list[Product]:
        return list(db.session.scalars(select(Product).order_by(Product.id.asc())))

    def categories(self) -> list[str]:
        stmt = (
            select(Product.category)
            .where(Product.is_active.is_(True))
            .distinct()
            .order_by(Product.category.asc())
        )
        return list(db.session.scalars(stmt))

    def add(self, product: Product) -> Product:
        db.session.add(product)
        db.session.flush()
        return product

    def delete(self, product: Product) -> None:
        db.session.delete(product)


class CouponRepository:

    def get(self, coupon_id) -> Optional[Coupon]:
        return db.session.get(Coupon, coupon_id)

    def find_by_code(self, code: str) -> Optional[Coupon]:
        return db.session.scalar(select(Coupon).where(Coupon.code == code.strip().upper()))

    def find_active_by_code(self, code: str, now: datetime) -> Optional[Coupon]:
        stmt = select(Coupon).where(
            Coupon.code == code.strip().upper(),
            Coupon.is_active.is_(True),
            Coupon.start_date <= now,
            Coupon.end_date >= now,
        )
        return db.session.scalar(stmt)

    def increment_usage(self, coupon_id) -> None:
        db.session.execute(
            update(Coupon)
            .where(Coupon.id == coupon_id)
            .values(usage_count=Coupon.usage_count + 1)
            .execution_options(synchronize_session="fetch")
        )

    def list_all(self) -> list[Coupon]:
        return list(db.session.scalars(select(Coupon).order_by(Coupon.id.desc())))

    def add(self, coupon: Coupon) -> Coupon:
        db.session.add(coupon)
        db.session.flush()
        return coupon

    def delete(self, coupon: Coupon) -> None:
        db.session.delete(coupon)


class CartRepository:

    def find_by_owner(self, owner_id) -> Optional[Cart]:
        return db.session.scalar(select(Cart).where(Cart.user_id == owner_id))

    def get_by_owner(self, owner_id) -> Cart:
        """Return the owner's cart, creating an empty one on first access."""
        cart = self.find_by_owner(owner_id)
        if cart is None:
            cart = Cart(user_id=owner_id, subtotal=0, tax=0, discount=0, total=0)
            db.session.add(cart)
            db.session.flush()
        return cart

    def with_product(self, product_id) -> list[Cart]:
        stmt = select(Cart).join(CartItem).where(CartItem.product_id == product_id)
        return list(db.session.scalars(stmt).unique())

    def with_coupon(self, coupon_id) -> list[Cart]:
        return list(db.session.scalars(select(Cart).where(Cart.coupon_id == coupon_id)))

    def save(self, cart: Cart) -> Cart:
        db.session.add(cart)
        db.session.flush()
        return cart


class OrderRepository:

    def create(self, order: Order) -> Order:
        db.session.add(order)
        db.session.flush()
        return order

    def get(self, order_id) -> Optional[Order]:
        return db.session.get(Order, order_id)

    def find_by_owner_and_id(self, owner_id, order_id) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id, Order.user_id == owner_id)
        return db.session.scalar(stmt)

    def list_by_owner(self, owner_id, newest_first: bool = True) -> list[Order]:
        stmt = select(Order).where(Order.user_id == owner_id)
        if newest_first:
            stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        else:
            stmt = stmt.order_by(Order.created_at.asc(), Order.id.asc())
        return list(db.session.scalars(stmt))

    def list_all(self) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        return list(db.session.scalars(stmt))


class UserRepository:

    def get(self, user_id) -> Optional[User]:
        return db.session.get(User, user_id)

    def find_by_mobile(self, mobile_number: str, role: str | None = None) -> Optional[User]:
        stmt = select(User).where(User.mobile_number == mobile_number)
        if role:
            stmt = stmt.where(User.role == role)
        return db.session.scalar(stmt.order_by(User.id.asc()))

    def find_admin(self) -> Optional[User]:
        return db.session.scalar(select(User).where(User.role == "admin").order_by(User.id.asc()))

    def add(self, user: User) -> User:
        db.session.add(user)
        db.session.flush()
        return user


# Singleton instances
products = ProductRepository()
coupons = CouponRepository()
carts = CartRepository()
orders = OrderRepository()
users = UserRepository()
