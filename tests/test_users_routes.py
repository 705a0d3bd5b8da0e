"""HTTP tests for the users blueprint."""

from __future__ import annotations

from conftest import API

ACTIVITY = {
    "title": "Bake bread",
    "description": "Make a sourdough loaf from scratch.",
    "type": "cooking",
}


def test_get_profile(client, auth_headers):
    headers = auth_headers(username="alice")
    resp = client.get(f"{API}/users/me", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["username"] == "alice"


def test_profile_requires_auth(client):
    assert client.get(f"{API}/users/me").status_code == 401


def test_set_username(client, auth_headers):
    headers = auth_headers()
    resp = client.patch(f"{API}/users/me", json={"username": "new_name"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["username"] == "new_name"


def test_username_change_renames_contributions(client, auth_headers):
    headers = auth_headers(username="alice")
    created = client.post(f"{API}/activities", json=ACTIVITY, headers=headers).get_json()["data"]
    assert created["contributor_name"] == "alice"

    client.patch(f"{API}/users/me", json={"username": "alice_b"}, headers=headers)

    fetched = client.get(f"{API}/activities/{created['id']}").get_json()["data"]
    assert fetched["contributor_name"] == "alice_b"


def test_username_taken(client, auth_headers):
    auth_headers(email="bob@example.com", username="bob")
    headers = auth_headers(email="alice@example.com", username="alice")
    resp = client.patch(f"{API}/users/me", json={"username": "bob"}, headers=headers)
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Username already taken."


def test_same_username_is_a_no_op(client, auth_headers):
    headers = auth_headers(username="alice")
    resp = client.patch(f"{API}/users/me", json={"username": "alice"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["username"] == "alice"


def test_invalid_username(client, auth_headers):
    headers = auth_headers()
    resp = client.patch(f"{API}/users/me", json={"username": "x"}, headers=headers)
    assert resp.status_code == 422


def test_my_activities(client, auth_headers):
    alice = auth_headers(email="alice@example.com", username="alice")
    bob = auth_headers(email="bob@example.com", username="bob")
    client.post(f"{API}/activities", json=ACTIVITY, headers=alice)
    client.post(f"{API}/activities", json=dict(ACTIVITY, title="Fly a kite"), headers=bob)

    resp = client.get(f"{API}/users/me/activities", headers=alice)
    body = resp.get_json()
    assert resp.status_code == 200
    assert [a["title"] for a in body["data"]] == ["Bake bread"]
    assert body["meta"]["totalItems"] == 1
