"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition, replay and
timing tests against a real PostgreSQL.
"""

import pytest
from psycopg_pool import ConnectionPool

from otpgate.adapters.repository.postgres import PostgresAccountRepository


@pytest.fixture(autouse=True)
def _clean(clean_database: None) -> None:
    """Apply the root clean_database fixture to every adversarial test."""


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)
