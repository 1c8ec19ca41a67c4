# storefront/model/cart.py
from __future__ import annotations
from decimal import Decimal
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import D, round_money, to_float

class Cart(db.Model):
    __tablename__ = "cart"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, unique=True, index=True)
    coupon_id = db.Column(db.Integer, db.ForeignKey("coupon.id", ondelete="SET NULL"), nullable=True)

    # cached totals, written only by cart_service.recalc_cart
    subtotal = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    tax = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    discount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    items = db.relationship(
        "CartItem",
        backref="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.id.asc()"
    )
    coupon = db.relationship("Coupon", lazy="joined")

    def find_item(self, product_id: int) -> CartItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    def items_subtotal_dec(self) -> Decimal:
        return round_money(sum((i.line_total_dec() for i in self.items), Decimal("0")))

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [i.as_api() for i in self.items],
            "coupon": {
                "id": self.coupon.id,
                "code": self.coupon.code,
                "discount_percentage": float(self.coupon.discount_percentage or 0),
            } if self.coupon else None,
            "subtotal": to_float(self.subtotal),
            "tax": to_float(self.tax),
            "discount": to_float(self.discount),
            "total": to_float(self.total),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class CartItem(db.Model):
    __tablename__ = "cart_item"
    __table_args__ = (
        db.UniqueConstraint("cart_id", "product_id", name="uq_cart_item_product"),
        db.CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("cart.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False, default=1)
    # price snapshot from the last add/update of this line
    unit_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    product = db.relationship("Product", lazy="joined")

    def unit_price_dec(self) -> Decimal:
        return D(self.unit_price)

    def line_total_dec(self) -> Decimal:
        return round_money(self.unit_price_dec() * Decimal(self.quantity))

    def as_api(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.product.name if self.product else None,
            "image": self.product.image if self.product else None,
            "stock": self.product.stock if self.product else None,
            "price": to_float(self.unit_price_dec()),
            "quantity": self.quantity,
            "line_total": to_float(self.line_total_dec()),
        }
