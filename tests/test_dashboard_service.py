from storefront.services import cart_service, dashboard_service, order_service


def test_metrics_cover_orders_stock_and_coupons(customer, make_product, make_coupon):
    serum = make_product(name="Serum", price="100", stock=5)
    toner = make_product(name="Toner", price="50", stock=20)
    make_product(name="Lotion", price="10", stock=50)
    make_coupon(code="SAVE10", percentage="10", minimum="150")

    cart_service.add_item(customer.id, serum.id, 2)
    cart_service.apply_coupon(customer.id, "SAVE10")
    kept = order_service.place_order(customer.id)
    order_service.update_order_status(kept.id, "Packed")

    cart_service.add_item(customer.id, toner.id, 1)
    dropped = order_service.place_order(customer.id)
    order_service.cancel_order(customer.id, dropped.id)

    metrics = dashboard_service.get_dashboard_metrics()

    assert metrics["total_orders"] == 2
    assert metrics["products_in_inventory"] == 3
    assert metrics["total_items_sold"] == 2
    assert metrics["orders_by_status"] == [
        {"status": "Cancelled", "count": 1},
        {"status": "Packed", "count": 1},
    ]
    assert metrics["total_sales"] == 216.0
    assert metrics["low_stock_products"] == 1
    assert metrics["coupon_usage"] == 1
    assert metrics["total_customers"] == 1


def test_empty_store(app):
    metrics = dashboard_service.get_dashboard_metrics()

    assert metrics["total_orders"] == 0
    assert metrics["total_items_sold"] == 0
    assert metrics["orders_by_status"] == []
    assert metrics["total_sales"] == 0.0
    assert metrics["total_customers"] == 0
