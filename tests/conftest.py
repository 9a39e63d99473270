"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory AccountRepository with the same uniqueness and
  atomicity guarantees as the PostgreSQL adapter
- A fast password hasher (low bcrypt cost)
- Session token helpers
- A PostgreSQL connection pool for integration and adversarial tests,
  skipped when no database is reachable at DATABASE_URL
"""

import threading
import uuid
from collections.abc import Generator
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from otpgate.adapters.repository.postgres import run_migrations
from otpgate.adapters.tokens import JwtSessionTokens
from otpgate.config.settings import get_settings
from otpgate.domain.exceptions import DuplicateEmail, DuplicateUsername
from otpgate.domain.otp import OTP_CONSUMED, otp_matches
from otpgate.domain.passwords import PasswordHasher
from otpgate.domain.ports import Account, VerifyResult

TEST_JWT_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105


class InMemoryAccountRepository:
    """AccountRepository kept in a dict, serialized by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.accounts: dict[str, Account] = {}

    def get_by_email(self, email: str) -> Account | None:
        with self._lock:
            return next((a for a in self.accounts.values() if a.email == email), None)

    def get_by_username(self, username: str) -> Account | None:
        with self._lock:
            return next((a for a in self.accounts.values() if a.username == username), None)

    def get_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            return self.accounts.get(account_id)

    def create_account(self, username: str, email: str, password_hash: str, otp: str) -> Account:
        with self._lock:
            if any(a.username == username for a in self.accounts.values()):
                raise DuplicateUsername(username)
            if any(a.email == email for a in self.accounts.values()):
                raise DuplicateEmail(email)
            account = Account(
                id=str(uuid.uuid4()),
                username=username,
                email=email,
                password_hash=password_hash,
                email_verified=False,
                pending_otp=otp,
                created_at=datetime.now(UTC),
            )
            self.accounts[account.id] = account
            return account

    def delete_unverified(self, account_id: str) -> bool:
        with self._lock:
            account = self.accounts.get(account_id)
            if account is None or account.email_verified:
                return False
            del self.accounts[account_id]
            return True

    def consume_otp(self, email: str, otp: str) -> VerifyResult:
        with self._lock:
            account = next((a for a in self.accounts.values() if a.email == email), None)
            if account is None:
                return VerifyResult.NOT_FOUND
            if not otp_matches(account.pending_otp, otp):
                return VerifyResult.INVALID_CODE
            self.accounts[account.id] = replace(
                account, email_verified=True, pending_otp=OTP_CONSUMED
            )
            return VerifyResult.SUCCESS


class RecordingEmailSender:
    """EmailSender that remembers codes and can be told to fail."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[str, str]] = []

    def send_verification_code(self, email: str, code: str) -> bool:
        self.sent.append((email, code))
        return self.succeed

    def last_code_for(self, email: str) -> str:
        return next(code for to, code in reversed(self.sent) if to == email)


@pytest.fixture
def fake_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """bcrypt at its minimum cost to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_secret() -> str:
    return TEST_JWT_SECRET


@pytest.fixture
def session_tokens(jwt_secret: str) -> JwtSessionTokens:
    return JwtSessionTokens(secret=jwt_secret, ttl=timedelta(days=4))


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool against DATABASE_URL with migrations applied."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    try:
        pool.wait(timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable at DATABASE_URL")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
    yield
