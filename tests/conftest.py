"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from notifications.abstract_notifier import AbstractNotifier  # noqa: E402

TEST_SIGNING_KEY = "test-signing-key-0123456789abcdef0123"


class _BaseTestConfig(Config):
    TESTING = True
    APP_ENV = "testing"
    IS_PRODUCTION = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = TEST_SIGNING_KEY
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    SESSION_TTL_SECONDS = 7 * 24 * 60 * 60
    JWT_COOKIE_SECURE = False
    APP_BASE_URL = "https://lostnfound.test"
    EXPOSE_ERROR_DETAIL = True
    MAIL_SERVER = None


class RecordingNotifier(AbstractNotifier):
    """Notifier double that remembers every send and can be told to fail."""

    def __init__(self):
        self.sent: list[dict] = []
        self.result = True
        self.error: Exception | None = None

    def send_verification(self, email, username, token, base_url):
        self.sent.append(
            {"email": email, "username": username, "token": token, "base_url": base_url}
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def test_config() -> type[Config]:
    return _BaseTestConfig


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def app(test_config, notifier) -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(test_config, notifier=notifier)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def workflow(app: Flask):
    """Yield the app's auth workflow inside an application context."""

    with app.app_context():
        yield app.extensions["auth_workflow"]
