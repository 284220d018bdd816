"""
Domain exceptions - Semantic error types for the account lifecycle.

Every error carries a stable ``kind`` and a human-readable message.
None of them carries infrastructure detail (driver text, SQL, SMTP replies);
adapters' exceptions are translated to ServerError at the service boundary.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    kind = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AccountError):
    """Required input is missing or empty."""

    kind = "validation"
    default_message = "Missing required fields"


class ConflictError(AccountError):
    """Identity is already registered."""

    kind = "conflict"
    default_message = "Email already registered"


class NotFoundError(AccountError):
    """No matching code or account."""

    kind = "not_found"
    default_message = "Not found"


class AuthError(AccountError):
    """Credential mismatch or bad/expired session token."""

    kind = "auth"
    default_message = "Invalid email or password"


class ExpiredError(AccountError):
    """A matching one-time code exists but is past its expiry."""

    kind = "expired"
    default_message = "Code expired"


class ServerError(AccountError):
    """Storage or other infrastructure failure, detail withheld."""

    kind = "server"
    default_message = "Server error"
