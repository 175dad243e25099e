from __future__ import annotations

import pytest

from invoicing import create_app, db
from invoicing.models import Customer


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "testsecret")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "invoices.db"))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("INVOICE_DELETE_ENABLED", raising=False)
    monkeypatch.delenv("SESSION_COOKIE_SECURE", raising=False)

    app = create_app(
        ["--demo"], config={"TESTING": True, "WTF_CSRF_ENABLED": False}
    )

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer_id(app):
    with app.app_context():
        customer = Customer(name="Evil Rabbit", email="evil@rabbit.com")
        db.session.add(customer)
        db.session.commit()
        return customer.id
