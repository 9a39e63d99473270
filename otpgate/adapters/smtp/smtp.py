"""
SMTP email sender adapter - Implements EmailSender protocol.

Sends the verification code as a multipart text/HTML message through an
SMTP relay. Transport failures are logged and reported as False so the
registration service can roll the account back.
"""

import logging
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)

SUBJECT = "Your verification code"

_TEXT_BODY = (
    "Welcome! Your one-time verification code is: {code}\n\n"
    "Enter it to verify your email address and finish signing up. "
    "Do not share this code with anyone.\n"
)

_HTML_BODY = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto; padding: 20px;">
  <h2 style="text-align: center;">Welcome!</h2>
  <p>Use the following one-time code to verify your email address and finish signing up.</p>
  <p style="text-align: center; font-size: 24px; font-weight: bold; letter-spacing: 5px;">{code}</p>
  <p style="font-size: 14px;">Do not share this code with anyone.</p>
</div>
"""


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The timeout bounds each blocking SMTP call.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_starttls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_starttls = use_starttls
        self._timeout = timeout

    def build_message(self, email: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = email
        message["Subject"] = SUBJECT
        message.set_content(_TEXT_BODY.format(code=code))
        message.add_alternative(_HTML_BODY.format(code=code), subtype="html")
        return message

    def send_verification_code(self, email: str, code: str) -> bool:
        """
        Deliver the verification code through the SMTP relay.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Returns:
            True if the relay accepted the message, False on any SMTP or
            network error
        """
        message = self.build_message(email, code)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_starttls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending verification email to %s: %s", email, e)
            return False

        logger.info("Verification email sent to %s", email)
        return True
