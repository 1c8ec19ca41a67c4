from flask import Blueprint

bp = Blueprint("order", __name__, url_prefix="/customer/orders")

from . import routes  # noqa: E402,F401
