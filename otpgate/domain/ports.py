"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the value types the domain exchanges with
infrastructure and the interfaces (ports) that adapters implement.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


@dataclass(frozen=True)
class Account:
    """
    Stored account record.

    Never returned past the domain layer: password_hash and pending_otp
    are private. Use AccountProfile for anything the caller sees.
    """

    id: str
    username: str
    email: str
    password_hash: str
    email_verified: bool
    pending_otp: str | None
    created_at: datetime

    def to_profile(self) -> "AccountProfile":
        return AccountProfile(
            id=self.id,
            username=self.username,
            email=self.email,
            email_verified=self.email_verified,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class AccountProfile:
    """Public account fields, safe to expose to callers."""

    id: str
    username: str
    email: str
    email_verified: bool
    created_at: datetime


@dataclass(frozen=True)
class SessionClaims:
    """Decoded identity carried by a verified session token."""

    account_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


class VerifyResult(Enum):
    """
    Result of an OTP consumption attempt.

    Used by consume_otp() to indicate success or specific failure.
    """

    SUCCESS = "success"
    INVALID_CODE = "invalid_code"
    NOT_FOUND = "not_found"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def get_by_email(self, email: str) -> Account | None:
        """Return the account registered with a normalized email, if any."""
        ...

    def get_by_username(self, username: str) -> Account | None:
        """Return the account with this exact username, if any."""
        ...

    def get_by_id(self, account_id: str) -> Account | None:
        """Return the account with this id, if any."""
        ...

    def create_account(
        self, username: str, email: str, password_hash: str, otp: str
    ) -> Account:
        """
        Insert a new unverified account holding a pending verification code.

        Uniqueness of username and email is enforced by the store itself,
        atomically with the insert.

        Args:
            username: Requested username
            email: Normalized email address
            password_hash: bcrypt hashed password
            otp: 6-digit verification code

        Returns:
            The created Account

        Raises:
            DuplicateUsername: If the username is taken
            DuplicateEmail: If the email is taken
        """
        ...

    def delete_unverified(self, account_id: str) -> bool:
        """
        Delete an account that has not verified its email.

        Compensation for a failed verification email. Verified accounts
        are never deleted.

        Returns:
            True if a row was deleted
        """
        ...

    def consume_otp(self, email: str, otp: str) -> VerifyResult:
        """
        Compare a submitted code and mark the email verified on match.

        On SUCCESS, email_verified becomes true and pending_otp becomes the
        consumed sentinel in one atomic write. On INVALID_CODE the record
        is left unchanged.

        Args:
            email: Normalized email address
            otp: Code entered by the user

        Returns:
            VerifyResult indicating success or specific failure reason
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> bool:
        """
        Send verification code to email address.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Returns:
            True if the message was handed off for delivery, False otherwise
        """
        ...


class SessionTokens(Protocol):
    """Port interface for minting and checking signed session tokens."""

    def issue(self, account_id: str, email: str, *, now: datetime | None = None) -> str:
        """Mint a signed token for an authenticated account."""
        ...

    def verify(self, token: str) -> SessionClaims:
        """
        Check signature and expiry of a token.

        Raises:
            InvalidToken: Signature mismatch or malformed token
            TokenExpired: Lifetime elapsed
        """
        ...
