# backend/optistore/__init__.py
from __future__ import annotations

from flask import Flask, g, request

from .config import Config
from .extensions import db, migrate


def _configure_super_admin(app: Flask) -> None:
    """Validate the super admin credential pair and keep only its hash."""
    from .services.auth_service import (
        CredentialValidationError,
        hash_secret,
        validate_super_admin_credentials,
    )

    username = app.config.get("SUPER_ADMIN_USERNAME")
    password = app.config.get("SUPER_ADMIN_PASSWORD")
    password_hash = app.config.get("SUPER_ADMIN_PASSWORD_HASH")

    if password_hash:
        if not username or len(username) < 3:
            raise ValueError("Invalid super admin configuration: username must be at least 3 characters")
    else:
        try:
            validate_super_admin_credentials(username, password)
        except CredentialValidationError as exc:
            raise ValueError(f"Invalid super admin configuration: {exc.message}") from exc
        password_hash = hash_secret(password, app.config["BCRYPT_ROUNDS"])

    app.config["SUPER_ADMIN_PASSWORD_HASH"] = password_hash
    app.config["SUPER_ADMIN_PASSWORD"] = None


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    _configure_super_admin(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.stores import stores_bp
    from .routes.customers import customers_bp
    from .routes.checkups import checkups_bp
    from .routes.orders import orders_bp
    from .routes.reports import reports_bp
    from .routes.backups import backups_bp
    from .routes.admin import admin_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(stores_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(checkups_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(backups_bp)
    app.register_blueprint(admin_bp)

    @app.teardown_request
    def drop_request_services(exc):
        g.pop("data_service", None)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
