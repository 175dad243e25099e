import logging
import os

from sqlalchemy import inspect

from invoicing import create_app, db
from invoicing.utils.cache import view_cache_key


def _clear_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "DATABASE_PATH",
        "INVOICE_DELETE_ENABLED",
        "SESSION_COOKIE_SECURE",
        "LOG_LEVEL",
        "CACHE_TYPE",
        "CACHE_DEFAULT_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SECRET_KEY", "testsecret")


def test_defaults(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    app = create_app([])
    assert app.config["INVOICE_DELETE_ENABLED"] is False
    assert app.config["SESSION_COOKIE_SECURE"] is True
    assert app.config["CACHE_TYPE"] == "SimpleCache"
    assert app.config["CACHE_DEFAULT_TIMEOUT"] == 300
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    assert uri.startswith("sqlite:///")
    assert os.path.basename(uri) == "invoices.db"
    assert app.logger.level == logging.INFO


def test_environment_overrides(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))
    monkeypatch.setenv("INVOICE_DELETE_ENABLED", "yes")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "0")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CACHE_DEFAULT_TIMEOUT", "60")
    app = create_app([])
    assert app.config["INVOICE_DELETE_ENABLED"] is True
    assert app.config["SESSION_COOKIE_SECURE"] is False
    assert app.config["CACHE_DEFAULT_TIMEOUT"] == 60
    assert app.config["SQLALCHEMY_DATABASE_URI"].endswith("invoices.db")
    assert str(tmp_path) in app.config["SQLALCHEMY_DATABASE_URI"]
    assert app.logger.level == logging.DEBUG


def test_demo_flag_relaxes_secure_cookies(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "demo.db"))
    app = create_app(["--demo"])
    assert app.config["DEMO"] is True
    assert app.config["SESSION_COOKIE_SECURE"] is False


def test_legacy_postgres_scheme_is_rewritten(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "postgres://user:pw@db.example.com/invoices")

    from invoicing import _database_uri

    assert _database_uri("/unused") == "postgresql://user:pw@db.example.com/invoices"


def test_schema_is_created_on_startup(app):
    with app.app_context():
        tables = inspect(db.engine).get_table_names()
    assert {"customers", "invoices"} <= set(tables)


def test_view_cache_key():
    assert view_cache_key("/dashboard/invoices") == "view//dashboard/invoices"
