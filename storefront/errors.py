# --- storefront/errors.py ---
from __future__ import annotations
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from .extensions import db, jwt
from .utils.api import api_error


class ShopError(Exception):
    """Base error. `kind` is the machine-checkable name sent to clients."""
    kind = "Error"
    status_code = 400

    def __init__(self, message: str, payload: dict | None = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def as_api(self) -> dict:
        return {"kind": self.kind, **self.payload}


class NotFoundError(ShopError):
    kind = "NotFound"
    status_code = 404


class UnavailableError(ShopError):
    kind = "Unavailable"


class InsufficientStockError(ShopError):
    kind = "InsufficientStock"

    def __init__(self, available: int, product_id=None, product_name: str | None = None):
        if product_name:
            message = f"Only {available} units of {product_name} available in stock"
        else:
            message = f"Only {available} units available in stock"
        super().__init__(message, {"available": available, "product_id": product_id})
        self.available = available
        self.product_id = product_id


class InvalidInputError(ShopError):
    kind = "InvalidInput"


class InvalidQuantityError(InvalidInputError):
    kind = "InvalidQuantity"


class EmptyCartError(ShopError):
    kind = "EmptyCart"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InvalidOrExpiredCouponError(ShopError):
    kind = "InvalidOrExpiredCoupon"

    def __init__(self, message: str = "Invalid or expired coupon code"):
        super().__init__(message)


class MinimumCartValueNotMetError(ShopError):
    kind = "MinimumCartValueNotMet"

    def __init__(self, minimum):
        super().__init__(
            f"Minimum cart value of {minimum} required for this coupon",
            {"minimum_cart_value": float(minimum)},
        )
        self.minimum = minimum


class ConflictError(ShopError):
    kind = "Conflict"
    status_code = 409


class CouponAlreadyAppliedError(ConflictError):
    kind = "CouponAlreadyApplied"

    def __init__(self, code: str):
        super().__init__("This coupon is already applied to your cart", {"code": code})


class ConflictingCouponError(ConflictError):
    kind = "ConflictingCoupon"

    def __init__(self, applied_code: str):
        super().__init__(
            f'Coupon "{applied_code}" is already applied to your cart. '
            "Please remove it first before applying a new coupon.",
            {"applied_code": applied_code},
        )
        self.applied_code = applied_code


class AlreadyDeliveredError(ConflictError):
    kind = "AlreadyDelivered"

    def __init__(self, message: str = "Delivered orders cannot be cancelled"):
        super().__init__(message)


class AlreadyCancelledError(ConflictError):
    kind = "AlreadyCancelled"

    def __init__(self, message: str = "Order is already cancelled"):
        super().__init__(message)


class InvalidStatusTransitionError(ConflictError):
    kind = "InvalidStatusTransition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change order status from '{current}' to '{requested}'",
            {"current": current, "requested": requested},
        )


class UnauthorizedError(ShopError):
    kind = "Unauthorized"
    status_code = 401


def register_error_handlers(app):
    @app.errorhandler(ShopError)
    def handle_shop_error(e: ShopError):
        current_app.logger.info("%s: %s", e.kind, e.message)
        r = jsonify(api_error(e.message, e.as_api()))
        r.status_code = e.status_code
        return r

    @app.errorhandler(404)
    def handle_not_found(e):
        r = jsonify(api_error("Url Not Found! Invalid URL!", {"kind": "NotFound"}))
        r.status_code = 404
        return r

    @app.errorhandler(405)
    def handle_method_not_allowed(e: HTTPException):
        r = jsonify(api_error(e.description, {"kind": "MethodNotAllowed"}))
        r.status_code = 405
        return r

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            r = jsonify(api_error(e.description, {"kind": e.name.replace(" ", "")}))
            r.status_code = e.code
            return r
        current_app.logger.exception("unhandled error on %s", e.__class__.__name__)
        db.session.rollback()
        r = jsonify(api_error("Internal server error", {"kind": "InternalError"}))
        r.status_code = 500
        return r

    # token failures share the error envelope
    def _token_error(message):
        r = jsonify(api_error(message, {"kind": "Unauthorized"}))
        r.status_code = 401
        return r

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return _token_error(reason)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return _token_error(f"Invalid token: {reason}")

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return _token_error("Token has expired")
