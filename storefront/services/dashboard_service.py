from sqlalchemy import func, select
from ..extensions import db
from ..model import Order, OrderItem, OrderStatus, Product, User

LOW_STOCK_THRESHOLD = 10


def get_dashboard_metrics() -> dict:
    not_cancelled = Order.status != OrderStatus.CANCELLED.value

    total_orders = db.session.scalar(select(func.count(Order.id)))
    products_in_inventory = db.session.scalar(select(func.count(Product.id)))

    total_items_sold = db.session.scalar(
        select(func.coalesce(func.sum(OrderItem.quantity), 0))
        .select_from(OrderItem)
        .join(Order, OrderItem.order_id == Order.id)
        .where(not_cancelled)
    )

    by_status = db.session.execute(
        select(Order.status, func.count(Order.id)).group_by(Order.status).order_by(Order.status)
    ).all()

    total_sales = db.session.scalar(
        select(func.coalesce(func.sum(Order.total), 0)).where(not_cancelled)
    )

    low_stock = db.session.scalar(
        select(func.count(Product.id)).where(Product.stock < LOW_STOCK_THRESHOLD)
    )
    coupon_usage = db.session.scalar(
        select(func.count(Order.id)).where(Order.coupon_id.is_not(None))
    )
    total_customers = db.session.scalar(
        select(func.count(User.id)).where(User.role == "customer")
    )

    return {
        "total_orders": total_orders or 0,
        "products_in_inventory": products_in_inventory or 0,
        "total_items_sold": int(total_items_sold or 0),
        "orders_by_status": [{"status": s, "count": c} for s, c in by_status],
        "total_sales": round(float(total_sales or 0), 2),
        "low_stock_products": low_stock or 0,
        "coupon_usage": coupon_usage or 0,
        "total_customers": total_customers or 0,
    }
