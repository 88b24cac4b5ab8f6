"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers HTML messages through an authenticated STARTTLS SMTP relay
(Gmail by default). Transport errors propagate to the caller so that a
failed delivery is never reported as a pending OTP.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """Implements EmailSender protocol over SMTP with STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_name: str = "Auth System",
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_name = from_name
        self._timeout = timeout

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Send an HTML message.

        Raises:
            smtplib.SMTPException: If the relay rejects login or delivery
            OSError: If the relay cannot be reached
        """
        message = MIMEMultipart("alternative")
        message["From"] = formataddr((self._from_name, self._username))
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            server.starttls()
            server.login(self._username, self._password)
            server.send_message(message)

        logger.info("Email sent to %s", to)
