"""One-time verification code generation."""

import secrets

CODE_MIN = 100000
CODE_MAX = 999999


def generate_verification_code() -> str:
    """
    Generate a 6-digit code uniform over 100000-999999.

    Uses the secrets module for cryptographic randomness.
    """
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def describe_lifetime(seconds: int) -> str:
    """Human wording for a code lifetime, e.g. "5 minutes" or "45 seconds"."""
    if seconds >= 60 and seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds} second" if seconds == 1 else f"{seconds} seconds"
