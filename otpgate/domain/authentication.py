"""
Authentication domain service - signin with username and password.

Verification is a hard precondition: an account whose email has not been
verified is refused before its password is even looked at.
"""

import logging
from dataclasses import dataclass, field

from .exceptions import AccountNotFound, AccountNotVerified, BadPassword
from .passwords import PasswordHasher
from .ports import AccountProfile, AccountRepository

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationService:
    """Checks credentials and exposes public account data."""

    repository: AccountRepository
    password_hasher: PasswordHasher = field(default_factory=PasswordHasher)

    def authenticate(self, username: str, password: str) -> AccountProfile:
        """
        Authenticate an account by username and password.

        Returns:
            Public profile of the authenticated account

        Raises:
            AccountNotFound: Unknown username
            AccountNotVerified: Email not verified yet
            BadPassword: Password mismatch
        """
        account = self.repository.get_by_username(username)
        if account is None:
            self.password_hasher.burn(password)
            raise AccountNotFound(username)

        if not account.email_verified:
            raise AccountNotVerified(username)

        if not self.password_hasher.verify(password, account.password_hash):
            logger.info("Rejected signin for %s: bad password", username)
            raise BadPassword(username)

        logger.info("Account %s signed in", account.id)
        return account.to_profile()

    def get_profile(self, account_id: str) -> AccountProfile | None:
        """Re-read live account state, e.g. after a session token was verified."""
        account = self.repository.get_by_id(account_id)
        return account.to_profile() if account is not None else None
