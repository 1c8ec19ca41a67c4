from datetime import datetime, timezone
from enum import Enum
from ..extensions import db
from ..utils.money import D, to_float


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OrderStatus(str, Enum):
    PLACED = "Order Placed"
    PACKED = "Packed"
    SHIPPING = "Shipping"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# forward-only fulfilment track; CANCELLED sits outside it
FULFILMENT_TRACK = [
    OrderStatus.PLACED,
    OrderStatus.PACKED,
    OrderStatus.SHIPPING,
    OrderStatus.DELIVERED,
]


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PLACED.value, index=True)

    # Link to the coupon used at checkout (not enforced, coupons can be deleted)
    coupon_id = db.Column(db.Integer, nullable=True, index=True)
    coupon_code = db.Column(db.String(64), nullable=True)

    # Money snapshot
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)
    discount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    tax = db.Column(db.Numeric(12, 2), nullable=False)
    total = db.Column(db.Numeric(12, 2), nullable=False)

    shipping_address = db.Column(db.String(512), nullable=False)

    created_at = db.Column(db.DateTime, default=_utcnow, index=True)

    items = db.relationship(
        "OrderItem",
        backref="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id.asc()"
    )

    @property
    def status_enum(self) -> OrderStatus:
        return OrderStatus(self.status)

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "coupon": {"id": self.coupon_id, "code": self.coupon_code} if self.coupon_id else None,
            "money": {
                "subtotal": to_float(self.subtotal),
                "discount": to_float(self.discount),
                "tax": to_float(self.tax),
                "total": to_float(self.total),
            },
            "shipping_address": self.shipping_address,
            "items": [i.as_api() for i in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)

    # snapshot, decoupled from later catalog edits
    product_id = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    def as_api(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": to_float(self.unit_price),
            "quantity": self.quantity,
            "line_total": to_float(D(self.unit_price) * self.quantity),
        }
