# storefront/model/product.py
from ..extensions import db
from sqlalchemy.sql import func

class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    category = db.Column(db.String(120), nullable=False, index=True)
    image = db.Column(db.String(1024), nullable=False, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price or 0),
            "stock": self.stock,
            "category": self.category,
            "image": self.image,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
