"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account verification and authentication flow.
It defines its own port interfaces for infrastructure abstraction, so
storage and email delivery are swappable adapters.
"""

from .accounts import AccountService, LoginResult, RegistrationResult
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

__all__ = [
    "AccountError",
    "AccountService",
    "AuthError",
    "CodeLedger",
    "ConflictError",
    "Credential",
    "CredentialStore",
    "EmailSender",
    "ExpiredError",
    "LoginResult",
    "NotFoundError",
    "OneTimeCode",
    "PasswordHasher",
    "RegistrationResult",
    "ServerError",
    "SessionTokenIssuer",
    "TokenClaims",
    "ValidationError",
]
