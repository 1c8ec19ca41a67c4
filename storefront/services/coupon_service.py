# storefront/services/coupon_service.py
from datetime import datetime, timezone
from decimal import Decimal
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..errors import ConflictError, InvalidInputError, NotFoundError
from ..model import Coupon
from ..repositories import coupons
from ..utils.fields import UNSET, is_set, pick
from ..utils.money import parse_money
from .cart_service import detach_coupon_everywhere

def _parse_iso8601(s):
    if not isinstance(s, str) or not s.strip():
        return None
    s = s.strip()
    if s.endswith("Z"): s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)  # store naive UTC
    return dt

def _date(data, key, required):
    raw = pick(data, key)
    if not is_set(raw):
        if required:
            raise InvalidInputError(f"{key} is required")
        return UNSET
    dt = _parse_iso8601(raw)
    if dt is None:
        raise InvalidInputError(f"Invalid datetime format for {key}")
    return dt

def _percentage(data, required):
    raw = pick(data, "discount_percentage")
    if not is_set(raw):
        if required:
            raise InvalidInputError("discount_percentage is required")
        return UNSET
    value = parse_money(raw)
    if value is None or value < 0 or value > 100:
        raise InvalidInputError("Discount percentage must be between 0 and 100")
    return value

def _minimum(data):
    raw = pick(data, "minimum_cart_value")
    if not is_set(raw):
        return UNSET
    value = parse_money(raw)
    if value is None or value < 0:
        raise InvalidInputError("minimum_cart_value must be a number >= 0")
    return value

def _flag(data, key):
    raw = pick(data, key)
    if is_set(raw) and not isinstance(raw, bool):
        raise InvalidInputError(f"{key} must be true or false")
    return raw

def _check_window(start, end):
    if start > end:
        raise InvalidInputError("End date must be after start date")


def list_coupons() -> list[Coupon]:
    return coupons.list_all()


def create_coupon(data: dict) -> Coupon:
    code = data.get("code")
    if not isinstance(code, str) or not code.strip():
        raise InvalidInputError("code is required")
    code = code.strip().upper()

    percentage = _percentage(data, required=True)
    minimum = _minimum(data)
    start_date = _date(data, "start_date", required=True)
    end_date = _date(data, "end_date", required=True)
    is_active = _flag(data, "is_active")
    _check_window(start_date, end_date)

    if coupons.find_by_code(code):
        raise ConflictError("Coupon code already exists", {"code": code})

    c = Coupon(
        code=code,
        discount_percentage=percentage,
        minimum_cart_value=minimum if is_set(minimum) else Decimal("0"),
        start_date=start_date,
        end_date=end_date,
        is_active=is_active if is_set(is_active) else True,
        usage_count=0,
    )
    try:
        coupons.add(c)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Coupon code already exists", {"code": code})

    current_app.logger.info("coupon %s created", c.code)
    return c


def update_coupon(coupon_id, data: dict) -> Coupon:
    c = coupons.get(coupon_id)
    if c is None:
        raise NotFoundError("Coupon not found")

    percentage = _percentage(data, required=False)
    minimum = _minimum(data)
    start_date = _date(data, "start_date", required=False)
    end_date = _date(data, "end_date", required=False)
    is_active = _flag(data, "is_active")

    # validate the merged window before touching the row
    _check_window(
        start_date if is_set(start_date) else c.start_date,
        end_date if is_set(end_date) else c.end_date,
    )

    if is_set(percentage): c.discount_percentage = percentage
    if is_set(minimum): c.minimum_cart_value = minimum
    if is_set(start_date): c.start_date = start_date
    if is_set(end_date): c.end_date = end_date
    if is_set(is_active): c.is_active = is_active

    db.session.commit()
    current_app.logger.info("coupon %s updated", c.code)
    return c


def delete_coupon(coupon_id) -> None:
    c = coupons.get(coupon_id)
    if c is None:
        raise NotFoundError("Coupon not found")
    code = c.code
    detached = detach_coupon_everywhere(c.id)
    coupons.delete(c)
    db.session.commit()
    current_app.logger.info("coupon %s deleted, detached from %d carts", code, detached)
