"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging messages to stdout for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Used when no SMTP credentials are configured.
    """

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Log the message to console (simulates email delivery).

        The body is logged at INFO level so the code is visible in
        development logs.

        Args:
            to: Recipient email address
            subject: Message subject
            html_body: HTML message body
        """
        logger.info("[EMAIL] To: %s Subject: %s Body: %s", to, subject, html_body)
