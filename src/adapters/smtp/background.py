"""
Background email sender - fire-and-forget wrapper around any EmailSender.

send_verification_code() returns as soon as the delivery is queued on a
thread pool. Failures are logged from the worker and never reach the caller.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)


class BackgroundEmailSender:
    """Implements EmailSender protocol by delegating on a ThreadPoolExecutor."""

    def __init__(self, delegate: EmailSender, max_workers: int = 4) -> None:
        self._delegate = delegate
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="email-sender"
        )

    def send_verification_code(self, email: str, code: str) -> None:
        self.submit(email, code)

    def submit(self, email: str, code: str) -> Future[None]:
        """Queue a delivery and return its future."""
        future = self._executor.submit(self._delegate.send_verification_code, email, code)
        future.add_done_callback(lambda f: self._log_failure(f, email))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting deliveries; optionally wait for queued ones."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future[None], email: str) -> None:
        error = future.exception()
        if error is not None:
            logger.error(
                "Verification code delivery failed for %s: %s", email, type(error).__name__
            )
