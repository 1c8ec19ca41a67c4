from flask import Blueprint

bp = Blueprint("product", __name__, url_prefix="/customer")

from . import routes  # noqa: E402,F401
