"""Shared fixtures: an in-memory app per test plus helpers to sign users in."""

from __future__ import annotations

import pytest

from api import create_app
from models import storage

API = "/api/v1"
PASSWORD = "correct-horse-battery"


@pytest.fixture()
def app():
    """Fresh application bound to its own in-memory SQLite database."""
    app = create_app("test")
    with app.app_context():
        yield app
        storage.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    return app.extensions["container"]


@pytest.fixture()
def auth_service(container):
    return container.auth_service


@pytest.fixture()
def register(client):
    """Register a user through the API and return the response body's ``data``."""

    def _register(email="alice@example.com", password=PASSWORD, username=None):
        body = {"email": email, "password": password}
        if username is not None:
            body["username"] = username
        resp = client.post(f"{API}/auth/register", json=body)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _register


@pytest.fixture()
def login(client):
    """Log in through the API and return the token body."""

    def _login(email="alice@example.com", password=PASSWORD):
        resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login


@pytest.fixture()
def auth_headers(register, login):
    """Register and log in a user; returns ``Authorization`` headers for them."""

    def _headers(email="alice@example.com", username=None):
        register(email=email, username=username)
        tokens = login(email=email)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _headers
