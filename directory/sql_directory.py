"""SQLAlchemy-backed user directory."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.user import User
from services.errors import (
    AuthError,
    StorageFailure,
    duplicate_email,
    duplicate_username,
)

from .abstract_directory import AbstractUserDirectory

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("User store operation failed: %s", exc.__class__.__name__)
        raise StorageFailure(str(exc)) from exc


class SQLAlchemyUserDirectory(AbstractUserDirectory):
    """Store users in the ``users`` table through the Flask-SQLAlchemy session.

    The table's unique constraints are the authoritative duplicate check;
    the lookups done before inserting only produce the friendlier error
    earlier.
    """

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: str,
        verification_token: str | None,
    ) -> User:
        if self.find_by_username(username) is not None:
            raise duplicate_username()
        if self.find_by_email(email) is not None:
            raise duplicate_email()

        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            is_verified=False,
            verification_token=verification_token,
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise self._classify_conflict(username, email) from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageFailure(str(exc)) from exc
        return user

    def _classify_conflict(self, username: str, email: str) -> AuthError:
        # A concurrent signup won the race; find out which column collided.
        if self.find_by_username(username) is not None:
            return duplicate_username()
        if self.find_by_email(email) is not None:
            return duplicate_email()
        return StorageFailure("Integrity error while creating user.")

    def get(self, user_id: int) -> User | None:
        with _storage_errors():
            return db.session.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        with _storage_errors():
            return User.query.filter_by(username=username).first()

    def find_by_email(self, email: str) -> User | None:
        with _storage_errors():
            return User.query.filter_by(email=email).first()

    def find_by_verification_token(self, token: str) -> User | None:
        with _storage_errors():
            return User.query.filter_by(verification_token=token).first()

    def mark_verified(self, user_id: int) -> None:
        with _storage_errors():
            User.query.filter_by(id=user_id).update(
                {User.is_verified: True, User.verification_token: None}
            )
            db.session.commit()

    def list_users(self) -> Sequence[User]:
        with _storage_errors():
            return User.query.order_by(User.created_at.asc(), User.id.asc()).all()
