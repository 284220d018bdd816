"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers verification codes over SMTP with a plain-text body and an HTML
alternative. Every connection is opened with a socket timeout so a slow
mail server cannot hold a caller indefinitely.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.domain.codes import describe_lifetime

logger = logging.getLogger(__name__)

SUBJECT = "Verify your RemindKaro account"

_HTML_TEMPLATE = """\
<h2>Email Verification</h2>
<p>Your OTP is: <strong>{code}</strong></p>
<p>This OTP will expire in {lifetime}.</p>
<p>Do not share this OTP with anyone.</p>
"""


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Opens a fresh connection per message; failures propagate as
    smtplib.SMTPException or OSError.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
        ttl_seconds: int = 300,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self._lifetime = describe_lifetime(ttl_seconds)

    def build_message(self, email: str, code: str) -> EmailMessage:
        """Compose the verification email for a recipient."""
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._sender
        message["To"] = email
        message.set_content(
            f"Your OTP is {code}. It will expire in {self._lifetime}."
        )
        message.add_alternative(
            _HTML_TEMPLATE.format(code=code, lifetime=self._lifetime), subtype="html"
        )
        return message

    def send_verification_code(self, email: str, code: str) -> None:
        message = self.build_message(email, code)

        with self._new_connection() as conn:
            if self._use_tls:
                conn.starttls()
            if self._username:
                conn.login(self._username, self._password)
            conn.send_message(message)

        logger.info("Verification code sent to %s", email)

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port, timeout=self._timeout)
