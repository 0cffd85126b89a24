"""User directory abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from models.user import User


class AbstractUserDirectory(ABC):
    """Interface for user stores.

    Implementations must enforce unique usernames and emails and raise
    ``DuplicateUsername``/``DuplicateEmail`` kinds of ``AuthError`` on
    conflicts, including conflicts detected by the store itself.
    """

    @abstractmethod
    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: str,
        verification_token: str | None,
    ) -> User:
        """Persist a new unverified user and return it."""

    @abstractmethod
    def get(self, user_id: int) -> User | None:
        """Return the user with the given id, if any."""

    @abstractmethod
    def find_by_username(self, username: str) -> User | None:
        """Return the user with exactly this username, if any."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user registered with this email, if any."""

    @abstractmethod
    def find_by_verification_token(self, token: str) -> User | None:
        """Return the user currently holding this verification token, if any."""

    @abstractmethod
    def mark_verified(self, user_id: int) -> None:
        """Set ``is_verified`` and clear the verification token in one update."""

    @abstractmethod
    def list_users(self) -> Sequence[User]:
        """Return every user ordered by creation."""
