"""
One-time verification codes.

Codes are 6-digit strings drawn uniformly from 100000-999999 using the
secrets module. Once consumed, an account's pending code is replaced by
OTP_CONSUMED, which is non-numeric and therefore never equal to a code
that can be issued.
"""

import secrets

OTP_CONSUMED = "MAIL_VERIFICATION_DONE"

_OTP_LOW = 100000
_OTP_SPAN = 900000


def generate_otp() -> str:
    """Generate a cryptographically secure 6-digit verification code."""
    return str(_OTP_LOW + secrets.randbelow(_OTP_SPAN))


def otp_matches(pending_otp: str | None, entered: str) -> bool:
    """
    Check a submitted code against the account's pending code.

    A missing or already consumed code never matches, not even when the
    caller submits the sentinel text itself. Comparison is done on UTF-8
    bytes so arbitrary input (empty, non-ASCII) is handled safely.
    """
    if pending_otp is None or pending_otp == OTP_CONSUMED:
        return False
    return secrets.compare_digest(pending_otp.encode(), entered.encode())
