# storefront/system/routes.py
from datetime import datetime, timezone
from ..utils.api import ok
from . import bp

@bp.get("/")
def root():
    return ok("eCommerce API is running")

@bp.get("/healthCheck")
def health_check():
    return ok("eCommerce API is healthy", {"timestamp": datetime.now(timezone.utc).isoformat()})
