"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain works with and the interfaces
(ports) it requires from infrastructure. Adapters implement these protocols
by structural subtyping.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class Credential:
    """
    Persisted account record.

    password_hash is a bcrypt hash and never leaves the domain;
    use public_fields() for anything returned to a caller.
    """

    id: int
    name: str
    email: str
    password_hash: str
    phone: str | None = None
    verified: bool = False

    def public_fields(self) -> dict[str, object]:
        """Fields safe to return to a client."""
        return {
            "user_id": self.id,
            "name": self.name,
            "email": self.email,
            "mobile_number": self.phone,
            "is_email_verified": self.verified,
        }


@dataclass(frozen=True)
class OneTimeCode:
    """Issued verification code; inert once expires_at has passed."""

    email: str
    code: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class TokenClaims:
    """Assertion carried by a validated session token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class CredentialStore(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Credential | None:
        """Return the credential for a normalized email, or None."""
        ...

    def find_by_id(self, user_id: int) -> Credential | None:
        """Return the credential with this id, or None."""
        ...

    def insert(
        self, name: str, email: str, password_hash: str, phone: str | None
    ) -> Credential | None:
        """
        Insert a new unverified credential.

        Uniqueness of email must be enforced by the store itself so that
        two concurrent inserts for the same email cannot both succeed.

        Returns:
            The stored credential, or None if the email is already taken
        """
        ...

    def set_verified(self, email: str) -> None:
        """Mark the credential for email as verified (idempotent)."""
        ...


class CodeLedger(Protocol):
    """Port interface for one-time code persistence."""

    def issue(self, email: str, code: str, expires_at: datetime) -> None:
        """Append a code for email. Duplicates and older codes are kept."""
        ...

    def find_latest_match(self, email: str, code: str) -> OneTimeCode | None:
        """Return the most recently issued row for (email, code), expired or not."""
        ...

    def find_latest(self, email: str) -> OneTimeCode | None:
        """Return the most recently issued row for email."""
        ...

    def delete_match(self, email: str, code: str) -> bool:
        """
        Delete every row for exactly (email, code).

        Returns:
            True if at least one row was deleted, False if none existed
            (e.g. a concurrent verification already consumed it)
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send verification code to email address.

        Raises on delivery failure; callers decide whether to swallow it.

        Args:
            email: Recipient email address
            code: 6-digit verification code
        """
        ...
