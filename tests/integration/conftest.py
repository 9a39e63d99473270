"""
Shared fixtures for integration tests.

Every test here runs against a real PostgreSQL and starts from an
empty accounts table.
"""

import pytest


@pytest.fixture(autouse=True)
def _clean(clean_database: None) -> None:
    """Apply the root clean_database fixture to every integration test."""
