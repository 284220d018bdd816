"""
PostgreSQL repository adapters - Implement CredentialStore and CodeLedger.

This module provides the PostgreSQL implementations of the domain's
persistence ports using psycopg3 with raw SQL.

Concurrency Design:
-------------------
1. **Duplicate registration**: users.email carries a UNIQUE constraint and
   inserts use ON CONFLICT (email) DO NOTHING. Of two concurrent inserts for
   the same email exactly one returns a row.

2. **Single-use codes**: delete_match reports the DELETE's row count. Two
   concurrent verifiers may both read the same code, but only one DELETE
   removes it; the other sees rowcount 0.

3. **Duplicate codes**: otp_verifications has no uniqueness on
   (email, otp). Reads pick the newest row by (created_at, id).
"""

import logging
from datetime import datetime
from pathlib import Path

from psycopg_pool import ConnectionPool

from src.domain.ports import Credential, OneTimeCode

logger = logging.getLogger(__name__)

_CREDENTIAL_COLUMNS = "user_id, name, email, password_hash, mobile_number, is_email_verified"


def _to_credential(row: tuple) -> Credential:
    return Credential(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        phone=row[4],
        verified=row[5],
    )


def _to_code(row: tuple) -> OneTimeCode:
    return OneTimeCode(email=row[0], code=row[1], expires_at=row[2], created_at=row[3])


class PostgresCredentialStore:
    """
    Implements CredentialStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> Credential | None:
        sql = f"SELECT {_CREDENTIAL_COLUMNS} FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _to_credential(row) if row is not None else None

    def find_by_id(self, user_id: int) -> Credential | None:
        sql = f"SELECT {_CREDENTIAL_COLUMNS} FROM users WHERE user_id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id,))
            row = cursor.fetchone()
        return _to_credential(row) if row is not None else None

    def insert(
        self, name: str, email: str, password_hash: str, phone: str | None
    ) -> Credential | None:
        """
        Insert an unverified account.

        The UNIQUE constraint on email decides concurrent inserts;
        ON CONFLICT DO NOTHING turns the loser into an empty RETURNING.

        Returns:
            The stored credential, or None if email is already registered
        """
        sql = f"""
            INSERT INTO users (name, email, password_hash, mobile_number)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_CREDENTIAL_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (name, email, password_hash, phone))
            row = cursor.fetchone()
            conn.commit()
        return _to_credential(row) if row is not None else None

    def set_verified(self, email: str) -> None:
        sql = "UPDATE users SET is_email_verified = TRUE WHERE email = %s"

        with self._pool.connection() as conn:
            conn.execute(sql, (email,))
            conn.commit()


class PostgresCodeLedger:
    """
    Implements CodeLedger protocol via psycopg3.

    Rows are never updated; expired rows stay in place and are
    filtered by the domain at read time.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def issue(self, email: str, code: str, expires_at: datetime) -> None:
        sql = "INSERT INTO otp_verifications (email, otp, expires_at) VALUES (%s, %s, %s)"

        with self._pool.connection() as conn:
            conn.execute(sql, (email, code, expires_at))
            conn.commit()

    def find_latest_match(self, email: str, code: str) -> OneTimeCode | None:
        sql = """
            SELECT email, otp, expires_at, created_at
            FROM otp_verifications
            WHERE email = %s AND otp = %s
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, code))
            row = cursor.fetchone()
        return _to_code(row) if row is not None else None

    def find_latest(self, email: str) -> OneTimeCode | None:
        sql = """
            SELECT email, otp, expires_at, created_at
            FROM otp_verifications
            WHERE email = %s
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _to_code(row) if row is not None else None

    def delete_match(self, email: str, code: str) -> bool:
        """
        Delete every row for (email, code).

        Returns:
            True if this call removed at least one row
        """
        sql = "DELETE FROM otp_verifications WHERE email = %s AND otp = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, code))
            conn.commit()
            return cursor.rowcount > 0


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
