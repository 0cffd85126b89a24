"""Tests for the role-gated admin endpoints."""

from __future__ import annotations

from datetime import timedelta

from models import db
from models.user import Role, User


def _create_user(app, username: str, password: str, role: str = Role.USER.value) -> int:
    with app.app_context():
        hasher = app.extensions["auth_workflow"].hasher
        user = User(
            username=username,
            email=f"{username}@x.com",
            password_hash=hasher.hash(password),
            role=role,
            is_verified=True,
        )
        db.session.add(user)
        db.session.commit()
        return user.id


def _login(client, username: str, password: str) -> None:
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200


def test_admin_users_requires_session(client):
    response = client.get("/admin/users")

    assert response.status_code == 401
    payload = response.get_json()
    assert payload["error"] == "Unauthorized"
    assert payload["request_id"]


def test_admin_users_forbidden_for_regular_user(app, client):
    _create_user(app, "alice", "secret1")
    _login(client, "alice", "secret1")

    response = client.get("/admin/users")

    assert response.status_code == 403


def test_admin_users_lists_accounts(app, client):
    _create_user(app, "root", "adminpass", role=Role.ADMIN.value)
    _create_user(app, "alice", "secret1")
    _login(client, "root", "adminpass")

    response = client.get("/admin/users")

    assert response.status_code == 200
    listing = response.get_json()
    assert [entry["username"] for entry in listing] == ["root", "alice"]
    assert listing[0]["role"] == "admin"
    assert all("password_hash" not in entry for entry in listing)
    assert all("verification_token" not in entry for entry in listing)


def test_admin_users_rejects_expired_session(app, client):
    admin_id = _create_user(app, "root", "adminpass", role=Role.ADMIN.value)
    with app.app_context():
        signer = app.extensions["auth_workflow"].signer
        client.set_cookie("auth_token", signer.issue(admin_id, "admin", ttl=timedelta(seconds=-5)))

    response = client.get("/admin/users")

    assert response.status_code == 401
    payload = response.get_json()
    assert payload["error"] == "Unauthorized"
    assert payload["request_id"]


def test_admin_users_rejects_session_of_deleted_account(app, client):
    admin_id = _create_user(app, "root", "adminpass", role=Role.ADMIN.value)
    _login(client, "root", "adminpass")
    with app.app_context():
        db.session.delete(db.session.get(User, admin_id))
        db.session.commit()

    response = client.get("/admin/users")

    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"
