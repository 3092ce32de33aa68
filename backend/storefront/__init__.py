# backend/storefront/__init__.py
import atexit

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import Config, DEFAULT_SECRET_KEY
from .errors import NotFoundError
from .extensions import db, migrate, enable_sqlite_foreign_keys

# Engines of non-testing apps, disposed once at interpreter exit
_engines_to_dispose = []


@atexit.register
def _dispose_engines():
    for engine in _engines_to_dispose:
        engine.dispose()


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if app.config["SECRET_KEY"] == DEFAULT_SECRET_KEY and not app.config.get("TESTING"):
        app.logger.warning("SECRET_KEY is not set; tokens are signed with the development key")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    with app.app_context():
        enable_sqlite_foreign_keys(db.engine)
        if not app.config.get("TESTING"):
            _engines_to_dispose.append(db.engine)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.products import products_bp
    from .routes.orders import orders_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(orders_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # Unmatched routes and methods answer in the same JSON shape as the API
        if e.code == 404:
            return jsonify(NotFoundError().to_dict()), 404
        code = (e.name or "error").lower().replace(" ", "_")
        return jsonify({"message": e.name, "code": code}), e.code

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = set(app.config.get("CORS_ORIGINS", []))
        if origin and (origin in allowed_origins or "*" in allowed_origins):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
