# --- storefront/model/user.py ---

from sqlalchemy.sql import func
from ..extensions import db

class User(db.Model):
    __tablename__ = "user"
    __table_args__ = (
        db.UniqueConstraint("mobile_number", "role", name="uq_user_mobile_role"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(180), nullable=False)
    address = db.Column(db.String(512), nullable=False)
    mobile_number = db.Column(db.String(10), nullable=False, index=True)
    date_of_birth = db.Column(db.Date, nullable=False)
    email = db.Column(db.String(255), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False, default="")
    role = db.Column(db.String(16), nullable=False, default="customer", index=True)  # customer, admin

    created_at = db.Column(db.DateTime, server_default=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "mobile_number": self.mobile_number,
            "email": self.email,
            "address": self.address,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "role": self.role,
            }
