"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification codes for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development purposes - writes verification codes to the log.
    """

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Log verification code (simulates email delivery).

        Args:
            email: Recipient email address (normalized by domain layer)
            code: 6-digit verification code
        """
        logger.info("[VERIFICATION] Email: %s Code: %s", email, code)
