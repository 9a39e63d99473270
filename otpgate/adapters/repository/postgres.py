"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Uniqueness**: username and email carry UNIQUE constraints. The insert
   in create_account() is the single point where a duplicate is decided;
   a UniqueViolation is mapped to DuplicateUsername / DuplicateEmail by
   constraint name. Two concurrent signups for the same email cannot both
   commit.

2. **OTP consumption**: consume_otp() reads the row with SELECT FOR UPDATE
   and flips email_verified and pending_otp in a single UPDATE, so no
   reader ever sees a verified account whose code is still live, and two
   concurrent submissions of the same code cannot both succeed.

3. **Compensation**: delete_unverified() only removes rows that are still
   unverified.
"""

import logging
import uuid
from importlib import resources
from importlib.resources.abc import Traversable

from psycopg import errors
from psycopg_pool import ConnectionPool

from otpgate.domain.exceptions import DuplicateEmail, DuplicateUsername
from otpgate.domain.otp import OTP_CONSUMED, otp_matches
from otpgate.domain.ports import Account, VerifyResult

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = "id, username, email, password_hash, email_verified, pending_otp, created_at"


def _to_account(row: tuple) -> Account:
    return Account(
        id=str(row[0]),
        username=row[1],
        email=row[2],
        password_hash=row[3],
        email_verified=row[4],
        pending_otp=row[5],
        created_at=row[6],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def get_by_email(self, email: str) -> Account | None:
        return self._fetch_one(f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s", email)

    def get_by_username(self, username: str) -> Account | None:
        return self._fetch_one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE username = %s", username
        )

    def get_by_id(self, account_id: str) -> Account | None:
        try:
            key = uuid.UUID(account_id)
        except ValueError:
            return None
        return self._fetch_one(f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s", key)

    def create_account(
        self, username: str, email: str, password_hash: str, otp: str
    ) -> Account:
        """
        Insert a new unverified account.

        The UNIQUE constraints decide duplicates atomically with the insert.

        Raises:
            DuplicateUsername: accounts_username_key violated
            DuplicateEmail: accounts_email_key violated
        """
        sql = f"""
            INSERT INTO accounts (id, username, email, password_hash, email_verified, pending_otp)
            VALUES (%s, %s, %s, %s, FALSE, %s)
            RETURNING {_ACCOUNT_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(sql, (uuid.uuid4(), username, email, password_hash, otp))
                row = cursor.fetchone()
                conn.commit()
            except errors.UniqueViolation as e:
                conn.rollback()
                constraint = e.diag.constraint_name
                if constraint == "accounts_username_key":
                    raise DuplicateUsername(username) from None
                if constraint == "accounts_email_key":
                    raise DuplicateEmail(email) from None
                raise

        return _to_account(row)

    def delete_unverified(self, account_id: str) -> bool:
        sql = "DELETE FROM accounts WHERE id = %s AND email_verified = FALSE"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (uuid.UUID(account_id),))
            conn.commit()
            return cursor.rowcount == 1

    def consume_otp(self, email: str, otp: str) -> VerifyResult:
        """
        Compare a code and verify the account on match.

        Uses SELECT FOR UPDATE to lock the row during comparison,
        preventing two concurrent submissions from both succeeding.

        Args:
            email: Normalized email address
            otp: Code entered by the user

        Returns:
            VerifyResult indicating success or specific failure reason
        """
        select_sql = """
            SELECT id, pending_otp
            FROM accounts
            WHERE email = %s
            FOR UPDATE
        """

        # Both fields change in one statement
        verify_sql = """
            UPDATE accounts
            SET email_verified = TRUE, pending_otp = %s
            WHERE id = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(select_sql, (email,))
            row = cursor.fetchone()

            if row is None:
                conn.commit()
                return VerifyResult.NOT_FOUND

            account_id, pending_otp = row
            if not otp_matches(pending_otp, otp):
                conn.commit()
                return VerifyResult.INVALID_CODE

            cursor.execute(verify_sql, (OTP_CONSUMED, account_id))
            conn.commit()
            return VerifyResult.SUCCESS

    def _fetch_one(self, sql: str, param: object) -> Account | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (param,))
            row = cursor.fetchone()
        return _to_account(row) if row is not None else None


def run_migrations(pool: ConnectionPool, migrations_dir: Traversable | None = None) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
        migrations_dir: Directory of .sql files; defaults to the migrations
            shipped inside this package
    """
    if migrations_dir is None:
        migrations_dir = resources.files(__package__) / "migrations"

    if not migrations_dir.is_dir():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(
        (entry for entry in migrations_dir.iterdir() if entry.name.endswith(".sql")),
        key=lambda entry: entry.name,
    )

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
