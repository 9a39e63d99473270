"""
Registration domain service - signup and email verification.

Account lifecycle
=================

    register()      -> account stored unverified, pending_otp = issued code
    verify_email()  -> email_verified = true, pending_otp = OTP_CONSUMED

Create + notify
---------------
Storing the account and emailing the code are two independent operations
with no shared transaction. register() owns both: when delivery fails the
account it just created is deleted before the error is raised, so an
unverified account whose code never left the building cannot persist.

Uniqueness
----------
The email/username lookups before insert only give a friendly early error.
The store's UNIQUE constraints are the authority; a concurrent signup that
loses the race gets the same DuplicateEmail / DuplicateUsername from
create_account().
"""

import logging
from dataclasses import dataclass, field

from .exceptions import AccountNotFound, DeliveryFailed, DuplicateEmail, DuplicateUsername, OtpMismatch
from .otp import generate_otp
from .passwords import PasswordHasher
from .ports import AccountRepository, EmailSender, VerifyResult

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the registration flow: email normalization,
    password hashing, code generation, persistence, delivery and
    compensation on delivery failure.
    """

    repository: AccountRepository
    email_sender: EmailSender
    password_hasher: PasswordHasher = field(default_factory=PasswordHasher)

    def register(self, username: str, email: str, password: str) -> str:
        """
        Register a new account and send it a verification code.

        Args:
            username: Requested username (pre-validated)
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            Normalized email address the code was sent to

        Raises:
            DuplicateEmail: If email is already registered
            DuplicateUsername: If username is already taken
            DeliveryFailed: If the code could not be sent (account rolled back)
        """
        normalized_email = normalize_email(email)

        if self.repository.get_by_email(normalized_email) is not None:
            raise DuplicateEmail(normalized_email)
        if self.repository.get_by_username(username) is not None:
            raise DuplicateUsername(username)

        password_hash = self.password_hasher.hash(password)
        code = generate_otp()

        account = self.repository.create_account(username, normalized_email, password_hash, code)
        logger.info("Account %s created for %s, sending verification code", account.id, normalized_email)

        try:
            delivered = self.email_sender.send_verification_code(normalized_email, code)
        except Exception as e:
            self._compensate(account.id, normalized_email)
            raise DeliveryFailed(normalized_email) from e

        if not delivered:
            self._compensate(account.id, normalized_email)
            raise DeliveryFailed(normalized_email)

        return normalized_email

    def verify_email(self, email: str, otp_entered: str) -> str:
        """
        Consume the pending verification code of an account.

        Args:
            email: User's email (will be normalized)
            otp_entered: Code as typed by the user

        Returns:
            Normalized email address that is now verified

        Raises:
            AccountNotFound: No account with this email
            OtpMismatch: Code is wrong or was already used
        """
        normalized_email = normalize_email(email)
        result = self.repository.consume_otp(normalized_email, otp_entered)

        if result == VerifyResult.NOT_FOUND:
            raise AccountNotFound(normalized_email)
        if result == VerifyResult.INVALID_CODE:
            raise OtpMismatch(normalized_email)

        logger.info("Email verified for %s", normalized_email)
        return normalized_email

    def _compensate(self, account_id: str, email: str) -> None:
        """Undo account creation after the verification email failed."""
        deleted = self.repository.delete_unverified(account_id)
        logger.error(
            "Failed to send verification code to %s; account %s rolled back (deleted=%s)",
            email,
            account_id,
            deleted,
        )
