"""Create or update an administrator account.

Credentials come from ``ADMIN_USERNAME``, ``ADMIN_EMAIL`` and
``ADMIN_PASSWORD``; there is no built-in password.
"""

from __future__ import annotations

import os
import sys

from sqlalchemy.exc import IntegrityError

from app import create_app
from models import db
from models.user import Role, User
from utils.access import get_workflow


def seed_admin(username: str, email: str, password: str) -> tuple[User, str]:
    """Upsert the administrator inside the current app context.

    Raises ``ValueError`` when a credential is missing or the email belongs
    to a different account; the session is left clean either way.
    """

    if not username or not email or not password:
        raise ValueError("ADMIN_USERNAME, ADMIN_EMAIL and ADMIN_PASSWORD are required.")

    hasher = get_workflow().hasher
    admin = User.query.filter_by(username=username).first()
    holder = User.query.filter_by(email=email).first()
    if holder is not None and holder is not admin:
        raise ValueError(f"{email} already belongs to account {holder.username}.")

    if admin is None:
        admin = User(
            username=username,
            email=email,
            role=Role.ADMIN.value,
            is_verified=True,
            verification_token=None,
            password_hash=hasher.hash(password),
        )
        db.session.add(admin)
        action = "created"
    else:
        admin.email = email
        admin.role = Role.ADMIN.value
        admin.is_verified = True
        admin.verification_token = None
        admin.password_hash = hasher.hash(password)
        action = "updated"

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise ValueError(f"Could not save administrator {username}: {exc.orig}") from exc
    return admin, action


def main() -> int:
    app = create_app()
    with app.app_context():
        try:
            admin, action = seed_admin(
                os.getenv("ADMIN_USERNAME", "admin"),
                os.getenv("ADMIN_EMAIL", ""),
                os.getenv("ADMIN_PASSWORD", ""),
            )
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 1
        print(f"Admin user {action}: {admin.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
