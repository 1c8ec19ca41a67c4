# --- storefront/model/coupon.py ---

from ..extensions import db
from sqlalchemy.sql import func

class Coupon(db.Model):
    __tablename__ = "coupon"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)  # always uppercase

    discount_percentage = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    minimum_cart_value = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    # validity window, naive UTC
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    usage_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_api(self):
        return {
            "id": self.id,
            "code": self.code,
            "discount_percentage": float(self.discount_percentage or 0),
            "minimum_cart_value": float(self.minimum_cart_value or 0),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "usage_count": self.usage_count,
        }
