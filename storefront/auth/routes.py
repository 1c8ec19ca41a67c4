from flask import request
from . import bp
from ..services import account_service
from ..utils.api import ok
from ..utils.decorators import current_owner_id, customer_required


@bp.post("/customer/register")
def register():
    """
    Body: { name, address, mobile_number, date_of_birth, email?, password }
    """
    data = request.get_json(silent=True) or {}
    user = account_service.register_customer(data)
    token = account_service.issue_token(user)
    return ok("User registered successfully", {"token": token, "user": user.as_dict()}, status=201)


@bp.post("/customer/login")
def customer_login():
    data = request.get_json(silent=True) or {}
    user = account_service.authenticate(data.get("mobile_number"), data.get("password"), role="customer")
    token = account_service.issue_token(user)
    return ok("Login successful", {"token": token, "user": user.as_dict()})


@bp.post("/admin/login")
def admin_login():
    data = request.get_json(silent=True) or {}
    user = account_service.authenticate(data.get("mobile_number"), data.get("password"), role="admin")
    token = account_service.issue_token(user)
    return ok("Login successful", {"token": token, "user": user.as_dict()})


@bp.get("/customer/profile")
@customer_required
def get_profile():
    user = account_service.get_profile(current_owner_id())
    return ok("profile", {"user": user.as_dict()})


@bp.put("/customer/profile")
@customer_required
def update_profile():
    """Only the keys present in the body are changed."""
    data = request.get_json(silent=True) or {}
    user = account_service.update_profile(current_owner_id(), data)
    return ok("Profile updated successfully", {"user": user.as_dict()})
