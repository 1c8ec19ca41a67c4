# ------- storefront/utils/decorators.py -------
from functools import wraps
from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from ..utils.api import api_error


def current_owner_id() -> int | None:
    uid = get_jwt_identity()
    try:
        return int(uid)
    except (TypeError, ValueError):
        return None


# role gate with a per-role error message
def role_required(*roles, message: str | None = None):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_owner_id() is None:
                return jsonify(api_error("Unauthorized", {"kind": "Unauthorized"})), 401
            if get_jwt().get("role") not in roles:
                return jsonify(api_error(message or "Forbidden", {"kind": "Forbidden"})), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def customer_required(fn):
    return role_required("customer", message="Access denied. Customer privileges required")(fn)


def admin_required(fn):
    return role_required("admin", message="Access denied. Admin privileges required")(fn)
