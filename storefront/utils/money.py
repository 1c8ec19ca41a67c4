# storefront/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal

CENT = Decimal("0.01")

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def round_money(x: Money) -> Money:
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)

def parse_money(x) -> Money | None:
    """Lenient parse for request payloads; None when not a finite number."""
    if isinstance(x, bool) or x is None:
        return None
    try:
        value = Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value

def to_float(x) -> float:
    return float(round_money(x))
