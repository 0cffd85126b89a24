"""Notifier abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from urllib.parse import urlencode

DEFAULT_VERIFICATION_PATH = "/verify-email"


def build_verification_link(
    base_url: str, token: str, path: str = DEFAULT_VERIFICATION_PATH
) -> str:
    """Return the absolute link a user follows to confirm their email."""

    return f"{base_url.rstrip('/')}/{path.lstrip('/')}?{urlencode({'token': token})}"


class AbstractNotifier(ABC):
    """Interface for outbound account notifications."""

    @abstractmethod
    def send_verification(
        self, email: str, username: str, token: str, base_url: str
    ) -> bool:
        """Send the verification link; return whether it was accepted."""
