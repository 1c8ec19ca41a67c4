from flask import Flask
from .extensions import db, jwt, cors, migrate
from .config import Config


def create_app(config_class=Config):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    config_class.init_app(app)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": "*"}})
    migrate.init_app(app, db)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from .system import bp as system_bp; app.register_blueprint(system_bp)
    from .auth import bp as auth_bp; app.register_blueprint(auth_bp)
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .admin import bp as admin_bp; app.register_blueprint(admin_bp)

    from .cli import register_cli
    register_cli(app)

    with app.app_context():
        from . import model  # noqa: F401  (register tables)
        db.create_all()

        if app.config.get("BOOTSTRAP_ADMIN"):
            from .services.account_service import ensure_admin_from_config
            ensure_admin_from_config(app.config)

    app.logger.debug("blueprints: %s", sorted(app.blueprints.keys()))
    return app
