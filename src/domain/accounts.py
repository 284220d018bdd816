"""
Account domain service - verification and authentication flow.

This module contains the core business logic of the service: the lifecycle
of a credential from registration through email verification to an
authenticated session.

Account Lifecycle
=================

    register      -> credential stored (verified=False), one-time code issued,
                     delivery attempted (best-effort)
    verify_code   -> latest matching code consumed, verified=True (never reverts)
    login         -> password checked, session token issued
    authenticate  -> token checked, identity resolved

Login does not require the verified flag; verification gates nothing here.

Concurrency: duplicate registration is closed by the store's unique
constraint on email, and code consumption by a conditional delete whose
row count decides the single winner. No in-process locks are held.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .clock import Clock, utc_now
from .codes import generate_verification_code
from .exceptions import (
    AccountError,
    AuthError,
    ConflictError,
    ExpiredError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from .passwords import PasswordHasher
from .ports import CodeLedger, Credential, CredentialStore, EmailSender, OneTimeCode, TokenClaims
from .tokens import SessionTokenIssuer

logger = logging.getLogger(__name__)

CODE_TTL = timedelta(minutes=5)

# Same message for unknown email and wrong password
_LOGIN_FAILED = "Invalid email or password"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a successful registration."""

    credential: Credential
    code: str
    expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    token: str
    credential: Credential


@dataclass
class AccountService:
    """
    Domain service orchestrating registration, verification and login.

    Collaborators are injected once at startup; the service keeps no
    state of its own between calls.
    """

    credentials: CredentialStore
    codes: CodeLedger
    email_sender: EmailSender
    token_issuer: SessionTokenIssuer
    hasher: PasswordHasher = field(default_factory=PasswordHasher)
    code_ttl: timedelta = CODE_TTL
    clock: Clock = utc_now

    def register(
        self, name: str, email: str, password: str, phone: str | None = None
    ) -> RegistrationResult:
        """
        Register a new account and issue a verification code.

        Delivery of the code is attempted after the account and code are
        stored; a delivery failure is logged and does not fail registration.

        Raises:
            ValidationError: If name, email or password is missing
            ConflictError: If the email is already registered
            ServerError: If storage fails
        """
        self._require(name=name, email=email, password=password)
        normalized_email = self._normalize_email(email)
        phone = phone.strip() if phone and phone.strip() else None

        with self._storage("register"):
            if self.credentials.find_by_email(normalized_email) is not None:
                raise ConflictError()

            password_hash = self.hasher.hash(password)
            credential = self.credentials.insert(
                name.strip(), normalized_email, password_hash, phone
            )
            if credential is None:
                # Lost the race to a concurrent registration
                raise ConflictError()

            code = generate_verification_code()
            expires_at = self.clock() + self.code_ttl
            self.codes.issue(normalized_email, code, expires_at)

        logger.info("Registered account %s", credential.id)
        self._deliver(normalized_email, code)
        return RegistrationResult(credential=credential, code=code, expires_at=expires_at)

    def verify_code(self, email: str, code: str) -> None:
        """
        Consume a one-time code and mark the account's email as verified.

        Raises:
            ValidationError: If email or code is missing
            NotFoundError: If no code matches, or it was already consumed
            ExpiredError: If the latest matching code is past its expiry
            ServerError: If storage fails
        """
        self._require(email=email, code=code)
        normalized_email = self._normalize_email(email)
        code = code.strip()

        with self._storage("verify_code"):
            record = self.codes.find_latest_match(normalized_email, code)
            if record is None:
                raise NotFoundError("Invalid code")

            if record.is_expired(self.clock()):
                raise ExpiredError()

            # Flag before delete so a failed delete leaves the code retryable.
            # set_verified is idempotent; a concurrent loser holding the same
            # valid code sets nothing new.
            self.credentials.set_verified(normalized_email)

            # The delete's row count decides between concurrent verifiers
            if not self.codes.delete_match(normalized_email, code):
                raise NotFoundError("Invalid code")

        logger.info("Verified email for code issued at %s", record.created_at.isoformat())

    def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and issue a session token.

        Raises:
            ValidationError: If email or password is missing
            AuthError: If the email is unknown or the password is wrong
            ServerError: If storage fails
        """
        self._require(email=email, password=password)
        normalized_email = self._normalize_email(email)

        with self._storage("login"):
            credential = self.credentials.find_by_email(normalized_email)

        # bcrypt runs even for unknown emails
        stored_hash = credential.password_hash if credential is not None else None
        password_valid = self.hasher.verify(password, stored_hash)
        if credential is None or not password_valid:
            raise AuthError(_LOGIN_FAILED)

        token = self.token_issuer.issue(credential.id, credential.email)
        return LoginResult(token=token, credential=credential)

    def authenticate(self, token: str | None) -> TokenClaims:
        """
        Resolve a bearer token to the identity it asserts.

        Raises:
            AuthError: If the token is absent, malformed, forged or expired
        """
        return self.token_issuer.validate(token)

    def authenticate_and_fetch_profile(self, token: str | None) -> Credential:
        """
        Resolve a bearer token and re-fetch the current account state.

        Raises:
            AuthError: If the token is not valid
            NotFoundError: If the account no longer exists
            ServerError: If storage fails
        """
        claims = self.authenticate(token)

        with self._storage("fetch_profile"):
            credential = self.credentials.find_by_id(claims.user_id)

        if credential is None:
            raise NotFoundError("User not found")
        return credential

    def latest_code(self, email: str) -> OneTimeCode:
        """
        Return the most recently issued code for an email.

        Debug support only; the API exposes it behind a settings flag.

        Raises:
            ValidationError: If email is missing
            NotFoundError: If no code was ever issued for email
        """
        self._require(email=email)
        with self._storage("latest_code"):
            record = self.codes.find_latest(self._normalize_email(email))
        if record is None:
            raise NotFoundError("No code found for this email")
        return record

    def _deliver(self, email: str, code: str) -> None:
        try:
            self.email_sender.send_verification_code(email, code)
        except Exception:
            logger.warning("Verification code delivery failed for %s", email, exc_info=True)

    @contextmanager
    def _storage(self, operation: str) -> Iterator[None]:
        """Translate adapter failures into ServerError; domain errors pass through."""
        try:
            yield
        except AccountError:
            raise
        except Exception as e:
            logger.exception("Storage failure during %s", operation)
            raise ServerError() from e

    @staticmethod
    def _require(**fields: str | None) -> None:
        missing = [name for name, value in fields.items() if not value or not value.strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    @staticmethod
    def _normalize_email(email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
