"""
Password hashing - bcrypt with a fixed work factor.

Verification always runs bcrypt, even when there is no stored hash to
compare against, so that "unknown account" and "wrong password" take the
same time.

bcrypt only reads the first 72 bytes of a password. Longer passwords are
truncated to that length before hashing and checking, which keeps hashes
written by other bcrypt implementations valid.
"""

from dataclasses import dataclass

import bcrypt

BCRYPT_MAX_BYTES = 72

# Hash of a throwaway password, compared against when no account exists.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def _secret_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


@dataclass(frozen=True)
class PasswordHasher:
    """One-way password hashing and constant-time verification."""

    cost: int = 10

    def hash(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=self.cost)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        """
        Check password against a stored hash.

        A None hash is compared against a dummy hash and always fails.
        """
        secret = _secret_bytes(password)
        if password_hash is None:
            bcrypt.checkpw(secret, _DUMMY_BCRYPT_HASH)
            return False
        try:
            return bcrypt.checkpw(secret, password_hash.encode())
        except ValueError:
            # Stored value is not a bcrypt hash
            return False
