import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request
from flask_caching import Cache
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from flask_wtf.csrf import CSRFError

load_dotenv()
db = SQLAlchemy()
cache = Cache()
migrate = Migrate()
csrf = CSRFProtect()


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    """Return a boolean environment variable value."""

    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _database_uri(base_dir: str) -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        # Hosted Postgres providers still hand out the legacy scheme.
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        return database_url

    # DATABASE_PATH may point at a file or at a mounted directory.
    default_db_path = os.path.join(base_dir, "invoices.db")
    db_path = os.getenv("DATABASE_PATH", default_db_path)
    if os.path.isdir(db_path):
        db_path = os.path.join(db_path, "invoices.db")
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return f"sqlite:///{os.path.abspath(db_path)}"


def create_app(args=None, config=None):
    """Application factory used by Flask."""
    args = list(args or [])
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    session_cookie_secure = _get_bool_env(
        "SESSION_COOKIE_SECURE", default="--demo" not in args
    )
    app.config.update(
        SESSION_COOKIE_SECURE=session_cookie_secure,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SQLALCHEMY_DATABASE_URI=_database_uri(os.getcwd()),
        CACHE_TYPE=os.getenv("CACHE_TYPE", "SimpleCache"),
        CACHE_DEFAULT_TIMEOUT=int(os.getenv("CACHE_DEFAULT_TIMEOUT", "300")),
        INVOICE_DELETE_ENABLED=_get_bool_env("INVOICE_DELETE_ENABLED"),
        DEMO="--demo" in args,
    )
    if config:
        app.config.update(config)

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    app.logger.setLevel(getattr(logging, log_level, logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    csrf.init_app(app)

    @app.after_request
    def apply_security_headers(response):
        """Attach standard security headers to every response."""
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        """Render a helpful page when CSRF validation fails."""
        return (
            render_template("errors/csrf_error.html", reason=error.description),
            400,
        )

    from invoicing.services.invoice_actions import OperationDisabledError

    @app.errorhandler(OperationDisabledError)
    def handle_disabled_operation(error):
        """Answer requests for operations switched off by configuration."""
        app.logger.warning("Rejected disabled operation: %s", error)
        if request.accept_mimetypes.best == "application/json":
            return jsonify({"message": str(error)}), 501
        return (
            render_template("errors/not_implemented.html", reason=str(error)),
            501,
        )

    with app.app_context():
        # Ensure models are imported and the schema exists even when
        # migrations have not been run yet.
        from . import models  # noqa: F401

        db.create_all()

        from invoicing.routes.invoice_routes import invoice

        app.register_blueprint(invoice)

    app.logger.info(
        "Invoicing app ready (delete %s)",
        "enabled" if app.config["INVOICE_DELETE_ENABLED"] else "disabled",
    )
    return app
