"""
File: tests/test_admin.py
Purpose: Admin feature-flag updates: auth ordering, payload validation, live effect.
"""

from fastapi.testclient import TestClient
from config_api.config import Settings
from config_api.main import create_app


def _admin_headers(auth_headers, keys, admin=None):
    h = dict(auth_headers)
    h["X-Admin-Key"] = keys["admin"] if admin is None else admin
    return h


def test_update_is_reflected_in_subsequent_get(client, auth_headers, keys):
    resp = client.post("/api/config/features", json={"features": {"newCheckout": True}},
                       headers=_admin_headers(auth_headers, keys))
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Feature flags updated successfully"
    assert body["features"]["newCheckout"] is True
    assert body["features"]["analytics"] is True
    assert client.get("/api/config", headers=auth_headers).json()["features"]["newCheckout"] is True


def test_merges_are_last_write_wins(client, auth_headers, keys):
    h = _admin_headers(auth_headers, keys)
    client.post("/api/config/features", json={"features": {"a": True}}, headers=h)
    client.post("/api/config/features", json={"features": {"b": False}}, headers=h)
    features = client.post("/api/config/features", json={"features": {"a": False}}, headers=h).json()["features"]
    assert features["a"] is False
    assert features["b"] is False


def test_valid_key_without_admin_key_is_403(client, auth_headers):
    resp = client.post("/api/config/features", json={"features": {"x": True}}, headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "Forbidden"


def test_wrong_admin_key_is_403(client, auth_headers, keys):
    resp = client.post("/api/config/features", json={"features": {"x": True}},
                       headers=_admin_headers(auth_headers, keys, admin="guess"))
    assert resp.status_code == 403


def test_missing_api_key_is_401_even_with_admin_key(client, keys):
    resp = client.post("/api/config/features", json={"features": {"x": True}},
                       headers={"X-Admin-Key": keys["admin"]})
    assert resp.status_code == 401


def test_auth_failures_win_over_bad_payload(client, auth_headers):
    resp = client.post("/api/config/features", content=b"{not json", headers=auth_headers)
    assert resp.status_code == 403


def test_bad_payloads_are_400(client, auth_headers, keys):
    h = _admin_headers(auth_headers, keys)
    assert client.post("/api/config/features", json={}, headers=h).status_code == 400
    assert client.post("/api/config/features", json={"features": "on"}, headers=h).status_code == 400
    assert client.post("/api/config/features", json={"features": {"x": "yes"}}, headers=h).status_code == 400
    assert client.post("/api/config/features", content=b"{not json",
                       headers={**h, "Content-Type": "application/json"}).status_code == 400
    resp = client.post("/api/config/features", json=[1, 2], headers=h)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Bad Request"


def test_unset_admin_secret_forbids_everyone(environ, auth_headers):
    settings = Settings(API_KEY_IOS=auth_headers["X-API-Key"], ADMIN_API_KEY="")
    client = TestClient(create_app(settings, environ))
    resp = client.post("/api/config/features", json={"features": {"x": True}},
                       headers={**auth_headers, "X-Admin-Key": ""})
    assert resp.status_code == 403


def test_update_does_not_leak_into_other_apps(environ, settings, auth_headers, keys):
    first = TestClient(create_app(settings, environ))
    second = TestClient(create_app(settings, environ))
    first.post("/api/config/features", json={"features": {"darkMode": True}},
               headers=_admin_headers(auth_headers, keys))
    assert second.get("/api/config", headers=auth_headers).json()["features"]["darkMode"] is False


def test_get_on_features_is_not_an_environment(client, auth_headers):
    resp = client.get("/api/config/features", headers=auth_headers)
    assert resp.status_code == 405
    assert resp.headers["allow"] == "POST"
    assert resp.json()["error"] == "Method Not Allowed"
