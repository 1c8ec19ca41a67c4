# storefront/order/routes.py
from ..services import order_service
from ..utils.api import ok
from ..utils.decorators import current_owner_id, customer_required
from . import bp


@bp.post("")
@customer_required
def place_order():
    order = order_service.place_order(current_owner_id())
    resp = ok("Order placed successfully", {"order": order.as_api()}, status=201)
    resp.headers["X-Order-Id"] = str(order.id)
    return resp

@bp.get("")
@customer_required
def order_history():
    orders = order_service.get_order_history(current_owner_id())
    return ok("orders", {"count": len(orders), "orders": [o.as_api() for o in orders]})

@bp.get("/<int:order_id>")
@customer_required
def get_order(order_id: int):
    order = order_service.get_order_details(current_owner_id(), order_id)
    return ok("order", {"order": order.as_api()})

@bp.put("/<int:order_id>/cancel")
@customer_required
def cancel_order(order_id: int):
    order = order_service.cancel_order(current_owner_id(), order_id)
    return ok("Order cancelled successfully", {"order": order.as_api()})
