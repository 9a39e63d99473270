"""
Console email sender - development stand-in for the SMTP relay.

Nothing leaves the process: the code is written to the application log
so it can be copied from the server output during local development.
Selected with EMAIL_BACKEND=console.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """EmailSender that logs the code instead of mailing it."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def send_verification_code(self, email: str, code: str) -> bool:
        # A log write has no delivery failure mode
        logger.log(self._level, "[VERIFICATION] Email: %s Code: %s", email, code)
        return True
