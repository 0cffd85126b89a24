"""Fire-and-forget dispatch of notifications on a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial

from .abstract_notifier import AbstractNotifier

logger = logging.getLogger(__name__)


class BackgroundNotifier(AbstractNotifier):
    """Hand each send to a thread pool and return immediately.

    The wrapped notifier's outcome is only logged; callers get ``True`` as
    soon as the send is queued.
    """

    def __init__(
        self,
        notifier: AbstractNotifier,
        max_workers: int = 2,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.notifier = notifier
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notifier"
        )

    def send_verification(
        self, email: str, username: str, token: str, base_url: str
    ) -> bool:
        future = self._executor.submit(
            self.notifier.send_verification, email, username, token, base_url
        )
        future.add_done_callback(partial(_log_outcome, email))
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_outcome(email: str, future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error(
            "Verification email to %s failed: %s", email, error, exc_info=error
        )
    elif not future.result():
        logger.warning("Verification email to %s was not accepted", email)
