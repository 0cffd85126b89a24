"""User model definition."""

from datetime import datetime
from enum import Enum

from . import db


class Role(str, Enum):
    """Access level attached to an account and to its session tokens."""

    USER = "user"
    ADMIN = "admin"


ROLES = tuple(role.value for role in Role)


class User(db.Model):
    """Represents a registered account.

    ``verification_token`` is present only while the account is unverified;
    it is cleared in the same update that sets ``is_verified``.
    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default=Role.USER.value)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_token = db.Column(db.String(64), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_admin_dict(self) -> dict:
        """Return the listing view used by administrators."""

        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.username}>"
