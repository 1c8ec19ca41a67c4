import os
from datetime import timedelta


def _env_flag(name, default=False):
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    ENV = os.getenv("FLASK_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-secret-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)

    # default admin, provisioned by `flask create-admin` or at startup
    BOOTSTRAP_ADMIN = _env_flag("BOOTSTRAP_ADMIN", True)
    ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin")
    ADMIN_MOBILE_NUMBER = os.getenv("ADMIN_MOBILE_NUMBER", "9999999999")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin@123")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
    ADMIN_ADDRESS = os.getenv("ADMIN_ADDRESS", "Admin Office")

    @staticmethod
    def init_app(app):

        if not os.getenv("DATABASE_URL"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'app.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    BOOTSTRAP_ADMIN = False
    LOG_LEVEL = "WARNING"

    @staticmethod
    def init_app(app):
        pass
