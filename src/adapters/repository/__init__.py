"""Repository adapters - Database implementations."""

from .postgres import PostgresCodeLedger, PostgresCredentialStore, run_migrations

__all__ = ["PostgresCodeLedger", "PostgresCredentialStore", "run_migrations"]
