"""
Unit tests for run_migrations.

The pool is mocked; these tests check which SQL is executed and in what order.
"""

import logging
from importlib import resources
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from otpgate.adapters.repository.postgres import run_migrations


def executed_sql(pool: MagicMock) -> list[str]:
    conn = pool.connection.return_value.__enter__.return_value
    return [call.args[0] for call in conn.execute.call_args_list]


class TestRunMigrations:
    """Tests for migration discovery and execution."""

    def test_bundled_migrations_are_package_resources(self) -> None:
        """Migrations ship inside the package, not beside a source checkout."""
        migrations = resources.files("otpgate.adapters.repository") / "migrations"
        assert (migrations / "001_create_accounts.sql").is_file()

    def test_default_creates_accounts_table(self) -> None:
        pool = MagicMock()

        run_migrations(pool)

        statements = executed_sql(pool)
        assert len(statements) == 1
        assert "CREATE TABLE IF NOT EXISTS accounts" in statements[0]
        assert "accounts_email_key" in statements[0]

    def test_files_run_in_name_order(self, tmp_path: Path) -> None:
        (tmp_path / "002_second.sql").write_text("SELECT 2")
        (tmp_path / "001_first.sql").write_text("SELECT 1")
        (tmp_path / "notes.txt").write_text("not sql")
        pool = MagicMock()

        run_migrations(pool, tmp_path)

        assert executed_sql(pool) == ["SELECT 1", "SELECT 2"]

    def test_missing_directory_is_skipped(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        pool = MagicMock()

        with caplog.at_level(logging.WARNING):
            run_migrations(pool, tmp_path / "absent")

        pool.connection.assert_not_called()
        assert "Migrations directory not found" in caplog.text

    def test_failure_raises_runtime_error(self, tmp_path: Path) -> None:
        (tmp_path / "001_broken.sql").write_text("NOT SQL")
        pool = MagicMock()
        pool.connection.return_value.__enter__.return_value.execute.side_effect = Exception("syntax")

        with pytest.raises(RuntimeError, match="001_broken.sql"):
            run_migrations(pool, tmp_path)
