from flask import request
from ..errors import InvalidInputError
from ..services import product_service
from ..utils.api import ok
from ..utils.money import parse_money
from . import bp

# ---------- helpers ----------
def _parse_opt_money(key):
    raw = request.args.get(key)
    if raw is None or raw.strip() == "":
        return None
    value = parse_money(raw)
    if value is None:
        raise InvalidInputError(f"{key} must be a number")
    return value

# ---------- routes ----------
@bp.get("/products")
def list_products():
    """
    Query params:
      category   -> exact category match
      minPrice   -> number
      maxPrice   -> number
    Only active products with stock > 0 are listed.
    """
    category = (request.args.get("category") or "").strip() or None
    items = product_service.list_products(
        category=category,
        min_price=_parse_opt_money("minPrice"),
        max_price=_parse_opt_money("maxPrice"),
    )
    return ok("products", {"count": len(items), "products": [p.as_api() for p in items]})


@bp.get("/products/<int:product_id>")
def get_product(product_id: int):
    return ok("product", {"product": product_service.get_product(product_id).as_api()})


@bp.get("/categories")
def list_categories():
    return ok("categories", {"categories": product_service.list_categories()})
