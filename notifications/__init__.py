"""Outbound notification backends."""

from .abstract_notifier import AbstractNotifier, build_verification_link
from .background import BackgroundNotifier
from .log_notifier import LogNotifier
from .mail_notifier import MailNotifier

__all__ = [
    "AbstractNotifier",
    "BackgroundNotifier",
    "LogNotifier",
    "MailNotifier",
    "build_verification_link",
]
