"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong , David White Jr
Date: October 2025

Description:
Shared fixtures: an in-memory app seeded with a manager, a kitchen user,
menu items and tables, plus helpers for placing orders over HTTP.
"""

import os
import sys

import pytest
from werkzeug.security import generate_password_hash

# --- Make sure project root is importable ---
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app  # noqa: E402
from models import db, Manager, MenuItem, Table  # noqa: E402


def _seed():
    db.session.add_all([
        Manager(username="admin", password_hash=generate_password_hash("password"), role="manager"),
        Manager(username="kitchen", password_hash=generate_password_hash("kitchen"), role="kitchen"),
    ])
    db.session.add_all([
        MenuItem(name="Chicken Biryani", price=12.99, category="Desi", description="Aromatic basmati rice"),
        MenuItem(name="Beef Burger", price=8.99, category="Fast Food", description="Juicy beef patty"),
        MenuItem(name="Seasonal Soup", price=6.50, category="Soup", is_available=False),
    ])
    db.session.add_all([Table(table_number=n, capacity=4) for n in range(1, 23)])
    db.session.commit()


def build_app(**overrides):
    app = create_app(testing=True, config=overrides or None)
    with app.app_context():
        db.drop_all()
        db.create_all()
        _seed()
    return app


@pytest.fixture
def app():
    yield build_app()


@pytest.fixture
def app_factory():
    return build_app


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username, password):
    resp = client.post("/api/auth/manager/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return _login(client, "admin", "password")


@pytest.fixture
def kitchen_headers(client):
    return _login(client, "kitchen", "kitchen")


@pytest.fixture
def workflow(app):
    """The order workflow with an app context pushed; use for direct (non-HTTP) tests."""
    with app.app_context():
        yield app.extensions["workflow"]


@pytest.fixture
def hub(app):
    return app.extensions["realtime"]


@pytest.fixture
def make_order(client):
    def _make(items=None, table=5, session="session-1", payment="cash", **extra):
        payload = {
            "customerSessionId": session,
            "paymentMethod": payment,
            "items": items if items is not None else [{"menuItemId": 1, "quantity": 2}],
            **extra,
        }
        if table is not None:
            payload["tableNumber"] = table
        resp = client.post("/api/orders", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]
    return _make
