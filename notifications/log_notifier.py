"""Notifier used when no mail provider is configured."""

from __future__ import annotations

import logging

from .abstract_notifier import (
    DEFAULT_VERIFICATION_PATH,
    AbstractNotifier,
    build_verification_link,
)

logger = logging.getLogger(__name__)


class LogNotifier(AbstractNotifier):
    """Write verification links to the log instead of sending mail."""

    def __init__(self, verification_path: str = DEFAULT_VERIFICATION_PATH):
        self.verification_path = verification_path

    def send_verification(
        self, email: str, username: str, token: str, base_url: str
    ) -> bool:
        link = build_verification_link(base_url, token, self.verification_path)
        logger.warning(
            "Mail provider not configured. Verification link for %s <%s>: %s",
            username,
            email,
            link,
        )
        return True
