"""Tests covering security and hardening features."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app
from config import Config
from models import db
from services.errors import StorageFailure


class _SecurityBaseConfig(Config):
    TESTING = True
    IS_PRODUCTION = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "security-tests-signing-key-0123456789"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    APP_BASE_URL = "https://lostnfound.test"
    JWT_COOKIE_SECURE = False
    MAIL_SERVER = None


def _build_app(notifier, **overrides) -> Flask:
    class TestConfig(_SecurityBaseConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    application = create_app(TestConfig, notifier=notifier)
    with application.app_context():
        db.create_all()
    return application


def test_cors_allows_configured_origin(notifier):
    app = _build_app(notifier, CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get(
        "/health", headers={"Origin": "https://client.example"}
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("Access-Control-Allow-Credentials") == "true"
    assert response.headers.get("X-Request-ID")


def test_json_error_shape_for_invalid_request(notifier):
    app = _build_app(notifier)
    client = app.test_client()

    response = client.post(
        "/auth/signup",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert "Request content type" in payload["detail"]
    assert payload["request_id"]


def test_request_id_is_echoed(notifier):
    app = _build_app(notifier)
    client = app.test_client()

    response = client.get("/auth/verify", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.get_json()["request_id"] == "req-123"


@pytest.mark.parametrize("secret", [None, "", "change-me", "your-secret-key-change-in-production"])
def test_production_requires_real_secret(notifier, secret):
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        _build_app(notifier, IS_PRODUCTION=True, JWT_SECRET_KEY=secret)


def test_production_requires_base_url(notifier):
    with pytest.raises(RuntimeError, match="APP_BASE_URL"):
        _build_app(notifier, IS_PRODUCTION=True, APP_BASE_URL=None)


def test_development_without_secret_uses_random_key(notifier):
    first = _build_app(notifier, JWT_SECRET_KEY=None)
    second = _build_app(notifier, JWT_SECRET_KEY=None)

    assert first.config["JWT_SECRET_KEY"]
    assert first.config["JWT_SECRET_KEY"] != second.config["JWT_SECRET_KEY"]


def test_production_cookie_is_secure(notifier):
    app = _build_app(
        notifier,
        IS_PRODUCTION=True,
        JWT_COOKIE_SECURE=True,
        EXPOSE_ERROR_DETAIL=False,
    )
    client = app.test_client()
    client.post(
        "/auth/signup",
        json={
            "username": "alice",
            "email": "alice@x.com",
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )

    response = client.post("/auth/login", json={"username": "alice", "password": "secret1"})

    cookie = next(c for c in response.headers.getlist("Set-Cookie") if c.startswith("auth_token="))
    assert "Secure" in cookie


def _fail_lookups(app, monkeypatch):
    directory = app.extensions["auth_workflow"].directory

    def broken(*args, **kwargs):
        raise StorageFailure("connection refused by db-primary:5432")

    monkeypatch.setattr(directory, "find_by_username", broken)


def test_storage_failure_hides_detail_in_production(notifier, monkeypatch):
    app = _build_app(notifier, IS_PRODUCTION=True, EXPOSE_ERROR_DETAIL=False)
    _fail_lookups(app, monkeypatch)

    response = app.test_client().post(
        "/auth/login", json={"username": "alice", "password": "secret1"}
    )

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Request failed. Please try again."
    assert payload["code"] == "storage_failure"
    assert "detail" not in payload
    assert "db-primary" not in response.get_data(as_text=True)


def test_storage_failure_detail_in_diagnostic_mode(notifier, monkeypatch):
    app = _build_app(notifier, EXPOSE_ERROR_DETAIL=True)
    _fail_lookups(app, monkeypatch)

    response = app.test_client().post(
        "/auth/login", json={"username": "alice", "password": "secret1"}
    )

    assert response.status_code == 500
    assert "db-primary" in response.get_json()["detail"]
