"""HTTP tests for the auth and health blueprints."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from conftest import API, PASSWORD
from models import storage


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# health
# ---------------------------------------------------------------------------


def test_health(client):
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "database": "connected", "version": "1.0.0"}


def test_health_degraded(client, monkeypatch):
    def unreachable():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(storage, "ping", unreachable)
    resp = client.get(f"{API}/health")
    assert resp.status_code == 503
    assert resp.get_json()["status"] == "degraded"
    assert resp.get_json()["database"] == "disconnected"


def test_ping(client):
    resp = client.get(f"{API}/ping")
    assert resp.get_json() == {"message": "pong"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get(f"{API}/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "NOT_FOUND", "message": "Resource not found", "status": 404}


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


class TestRegisterRoute:
    def test_created_without_secrets(self, client):
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "alice@example.com", "password": PASSWORD, "username": "alice"},
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["email"] == "alice@example.com"
        assert data["username"] == "alice"
        assert set(data) == {"id", "email", "username", "created_at", "updated_at"}

    def test_email_whitespace_trimmed(self, client):
        resp = client.post(f"{API}/auth/register", json={"email": "  alice@example.com ", "password": PASSWORD})
        assert resp.status_code == 201
        assert resp.get_json()["data"]["email"] == "alice@example.com"

    def test_validation(self, client):
        resp = client.post(f"{API}/auth/register", json={"email": "not-an-email", "password": "short"})
        assert resp.status_code == 422
        body = resp.get_json()
        assert body["error"] == "VALIDATION_ERROR"
        assert "email" in body["details"]
        assert "password" in body["details"]

    @pytest.mark.parametrize("username", ["john.doe", "no spaces!", "u" * 60, "u" * 100])
    def test_username_accepts_any_characters_up_to_100(self, client, username):
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "alice@example.com", "password": PASSWORD, "username": username},
        )
        assert resp.status_code == 201
        assert resp.get_json()["data"]["username"] == username

    def test_empty_username_registers_without_one(self, client):
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "alice@example.com", "password": PASSWORD, "username": ""},
        )
        assert resp.status_code == 201
        assert resp.get_json()["data"]["username"] is None

    @pytest.mark.parametrize("username", ["ab", "u" * 101])
    def test_username_length_limits(self, client, username):
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "alice@example.com", "password": PASSWORD, "username": username},
        )
        assert resp.status_code == 422
        assert "username" in resp.get_json()["details"]

    def test_profile_update_keeps_strict_username_rule(self, client, auth_headers):
        headers = auth_headers()
        resp = client.patch(f"{API}/users/me", json={"username": "john.doe"}, headers=headers)
        assert resp.status_code == 422

    def test_duplicate(self, client, register):
        register()
        resp = client.post(f"{API}/auth/register", json={"email": "alice@example.com", "password": PASSWORD})
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "CONFLICT"


# ---------------------------------------------------------------------------
# login / refresh / logout
# ---------------------------------------------------------------------------


class TestLoginRoute:
    def test_returns_tokens_and_user(self, client, register):
        user = register()
        resp = client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 900
        assert body["access_token"] and body["refresh_token"]
        assert body["user"]["id"] == user["id"]

    def test_failures_are_indistinguishable(self, client, register):
        register()
        wrong = client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
        unknown = client.post(f"{API}/auth/login", json={"email": "bob@example.com", "password": PASSWORD})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json() == unknown.get_json()
        assert wrong.get_json()["message"] == "Invalid credentials."


class TestRefreshRoute:
    def test_rotation_and_replay(self, client, register, login):
        register(email="a@x.com", password="Secret123!", username="alice")
        r1 = login(email="a@x.com", password="Secret123!")["refresh_token"]

        resp = client.post(f"{API}/auth/refresh", json={"refresh_token": r1})
        assert resp.status_code == 200
        r2 = resp.get_json()["refresh_token"]
        assert r2 != r1

        replay = client.post(f"{API}/auth/refresh", json={"refresh_token": r1})
        assert replay.status_code == 401
        assert replay.get_json()["message"] == "Invalid or expired session."

        # Session was revoked by the replay
        after = client.post(f"{API}/auth/refresh", json={"refresh_token": r2})
        assert after.status_code == 401

        # A fresh login restores service
        r3 = login(email="a@x.com", password="Secret123!")["refresh_token"]
        restored = client.post(f"{API}/auth/refresh", json={"refresh_token": r3})
        assert restored.status_code == 200
        assert restored.get_json()["refresh_token"] != r3

    def test_access_token_is_not_a_refresh_token(self, client, register, login):
        register()
        tokens = login()
        resp = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert resp.status_code == 401

        # A rejected signature does not touch the stored session
        ok = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert ok.status_code == 200

    def test_missing_token(self, client):
        resp = client.post(f"{API}/auth/refresh", json={})
        assert resp.status_code == 422


class TestSessionRoutes:
    def test_logout_revokes_refresh(self, client, register, login):
        register()
        tokens = login()
        resp = client.post(f"{API}/auth/logout", headers=_bearer(tokens["access_token"]))
        assert resp.status_code == 200
        assert resp.get_json() == {"message": "Logout successful."}

        resp = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 401

    def test_logout_requires_bearer(self, client):
        resp = client.post(f"{API}/auth/logout")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "UNAUTHORIZED"

    def test_me_and_status(self, client, register, login):
        user = register(username="alice")
        headers = _bearer(login()["access_token"])

        me = client.get(f"{API}/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.get_json()["data"]["id"] == user["id"]

        status = client.get(f"{API}/auth/status", headers=headers)
        assert status.get_json() == {"status": "OK", "message": "You are authenticated!"}

    def test_refresh_token_cannot_authenticate(self, client, register, login):
        register()
        tokens = login()
        resp = client.get(f"{API}/auth/me", headers=_bearer(tokens["refresh_token"]))
        assert resp.status_code == 401
