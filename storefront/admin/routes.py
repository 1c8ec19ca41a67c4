# storefront/admin/routes.py
from flask import request
from ..services import coupon_service, dashboard_service, order_service, product_service
from ..utils.api import ok
from ..utils.decorators import admin_required
from . import bp


@bp.get("")
def root():
    return ok("Admin API is working")

# ---- products ----------------------------------------------------------------

@bp.get("/products")
@admin_required
def list_products():
    items = product_service.list_all_products()
    return ok("products", {"count": len(items), "products": [p.as_api() for p in items]})

@bp.post("/products")
@admin_required
def add_product():
    """
    Body: { name, description, price, stock?, category, image, is_active? }
    """
    p = product_service.create_product(request.get_json(silent=True) or {})
    return ok("Product added successfully", {"product": p.as_api()}, status=201)

@bp.put("/products/<int:product_id>")
@admin_required
def update_product(product_id: int):
    """Only keys present in the body change; stock=0 and is_active=false are honoured."""
    p = product_service.update_product(product_id, request.get_json(silent=True) or {})
    return ok("Product updated successfully", {"product": p.as_api()})

@bp.delete("/products/<int:product_id>")
@admin_required
def delete_product(product_id: int):
    product_service.delete_product(product_id)
    return ok("Product deleted successfully")

# ---- orders ------------------------------------------------------------------

@bp.get("/orders")
@admin_required
def list_orders():
    orders = order_service.list_all_orders()
    return ok("orders", {"count": len(orders), "orders": [o.as_api() for o in orders]})

@bp.put("/orders/<int:order_id>/status")
@admin_required
def update_order_status(order_id: int):
    """Body: { "status": "Packed" }"""
    data = request.get_json(silent=True) or {}
    order = order_service.update_order_status(order_id, data.get("status"))
    return ok("Order status updated successfully", {"order": order.as_api()})

# ---- coupons -----------------------------------------------------------------

@bp.get("/coupons")
@admin_required
def list_coupons():
    items = coupon_service.list_coupons()
    return ok("coupons", {"count": len(items), "coupons": [c.as_api() for c in items]})

@bp.post("/coupons")
@admin_required
def create_coupon():
    """
    Body: { code, discount_percentage, minimum_cart_value?, start_date, end_date, is_active? }
    Dates are ISO-8601; a trailing Z is accepted.
    """
    c = coupon_service.create_coupon(request.get_json(silent=True) or {})
    return ok("Coupon created successfully", {"coupon": c.as_api()}, status=201)

@bp.put("/coupons/<int:coupon_id>")
@admin_required
def update_coupon(coupon_id: int):
    c = coupon_service.update_coupon(coupon_id, request.get_json(silent=True) or {})
    return ok("Coupon updated successfully", {"coupon": c.as_api()})

@bp.delete("/coupons/<int:coupon_id>")
@admin_required
def delete_coupon(coupon_id: int):
    coupon_service.delete_coupon(coupon_id)
    return ok("Coupon deleted successfully")

# ---- dashboard ---------------------------------------------------------------

@bp.get("/dashboard")
@admin_required
def dashboard():
    return ok("dashboard", {"metrics": dashboard_service.get_dashboard_metrics()})
