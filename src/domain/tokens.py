"""
Session tokens - signed, time-limited bearer assertions.

Tokens are HS256 JWTs carrying user_id, email, iat and exp. They are not
persisted and cannot be revoked; a token is valid until it expires.
Expiry is checked against the issuer's clock rather than PyJWT's wall
clock so that the one-hour window behaves the same under test.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import jwt

from .clock import Clock, utc_now
from .exceptions import AuthError
from .ports import TokenClaims

TOKEN_LIFETIME = timedelta(hours=1)
ALGORITHM = "HS256"

_INVALID_TOKEN = "Invalid or expired token"


@dataclass(frozen=True)
class SessionTokenIssuer:
    """Issue and validate session tokens with a process-wide secret."""

    secret: str = field(repr=False)
    clock: Clock = utc_now

    def issue(self, user_id: int, email: str) -> str:
        """Encode a token for the account, valid for TOKEN_LIFETIME."""
        issued_at = self.clock()
        payload = {
            "user_id": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + TOKEN_LIFETIME).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def validate(self, token: str | None) -> TokenClaims:
        """
        Decode and check a token.

        Raises:
            AuthError: If the token is absent, malformed, has a bad
                signature, or is past its expiry
        """
        if not token:
            raise AuthError("Authorization token missing")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["user_id", "email", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError:
            raise AuthError(_INVALID_TOKEN) from None

        try:
            expires_at = datetime.fromtimestamp(payload["exp"], timezone.utc)
            issued_at = datetime.fromtimestamp(payload["iat"], timezone.utc)
            user_id = int(payload["user_id"])
        except (TypeError, ValueError, OverflowError):
            raise AuthError(_INVALID_TOKEN) from None

        if self.clock() >= expires_at:
            raise AuthError(_INVALID_TOKEN)

        return TokenClaims(
            user_id=user_id,
            email=str(payload["email"]),
            issued_at=issued_at,
            expires_at=expires_at,
        )
