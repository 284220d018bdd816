"""
Unit tests for the PostgreSQL adapters with a mocked connection pool.

These pin down row mapping and the row-count contracts without a database;
the SQL itself is exercised in tests/integration.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.adapters.repository.postgres import PostgresCodeLedger, PostgresCredentialStore

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def pool() -> MagicMock:
    return MagicMock()


def cursor_of(pool: MagicMock) -> MagicMock:
    conn = pool.connection.return_value.__enter__.return_value
    return conn.cursor.return_value.__enter__.return_value


class TestPostgresCredentialStore:
    def test_find_by_email_maps_row(self, pool: MagicMock) -> None:
        cursor_of(pool).fetchone.return_value = (1, "Alice", "a@x.com", "$2b$hash", "555", True)

        credential = PostgresCredentialStore(pool).find_by_email("a@x.com")

        assert credential is not None
        assert credential.id == 1
        assert credential.phone == "555"
        assert credential.verified is True

    def test_find_by_email_missing(self, pool: MagicMock) -> None:
        cursor_of(pool).fetchone.return_value = None

        assert PostgresCredentialStore(pool).find_by_email("a@x.com") is None

    def test_insert_conflict_returns_none(self, pool: MagicMock) -> None:
        """ON CONFLICT DO NOTHING yields no RETURNING row."""
        cursor = cursor_of(pool)
        cursor.fetchone.return_value = None

        result = PostgresCredentialStore(pool).insert("Alice", "a@x.com", "$2b$hash", None)

        assert result is None
        sql = cursor.execute.call_args[0][0]
        assert "ON CONFLICT (email) DO NOTHING" in sql

    def test_insert_success_returns_credential(self, pool: MagicMock) -> None:
        cursor_of(pool).fetchone.return_value = (7, "Alice", "a@x.com", "$2b$hash", None, False)

        result = PostgresCredentialStore(pool).insert("Alice", "a@x.com", "$2b$hash", None)

        assert result is not None
        assert result.id == 7
        assert result.verified is False


class TestPostgresCodeLedger:
    def test_delete_match_true_when_row_removed(self, pool: MagicMock) -> None:
        cursor_of(pool).rowcount = 1

        assert PostgresCodeLedger(pool).delete_match("a@x.com", "123456") is True

    def test_delete_match_false_when_nothing_removed(self, pool: MagicMock) -> None:
        cursor_of(pool).rowcount = 0

        assert PostgresCodeLedger(pool).delete_match("a@x.com", "123456") is False

    def test_find_latest_match_orders_newest_first(self, pool: MagicMock) -> None:
        cursor = cursor_of(pool)
        cursor.fetchone.return_value = ("a@x.com", "123456", NOW, NOW)

        record = PostgresCodeLedger(pool).find_latest_match("a@x.com", "123456")

        assert record is not None
        assert record.code == "123456"
        sql = cursor.execute.call_args[0][0]
        assert "ORDER BY created_at DESC, id DESC" in sql
        assert "LIMIT 1" in sql
