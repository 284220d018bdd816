"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCodeLedger, PostgresCredentialStore
from src.adapters.smtp.background import BackgroundEmailSender
from src.adapters.smtp.client import SmtpEmailSender
from src.adapters.smtp.console import ConsoleEmailSender
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.passwords import PasswordHasher
from src.domain.ports import EmailSender
from src.domain.tokens import SessionTokenIssuer


def build_email_sender(settings: Settings) -> BackgroundEmailSender:
    """
    Create the process-wide email sender for the configured backend.

    Deliveries always run in the background so registration latency
    does not depend on the mail transport.
    """
    delegate: EmailSender
    if settings.email_backend == "smtp":
        delegate = SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
            ttl_seconds=settings.code_ttl_seconds,
        )
    else:
        delegate = ConsoleEmailSender()
    return BackgroundEmailSender(delegate, max_workers=settings.notification_workers)


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_email_sender(request: Request) -> EmailSender:
    """Get the email sender created at startup."""
    return request.app.state.email_sender


def get_account_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the stores, email sender and token issuer for the domain service.
    """
    pool = get_pool(request)
    return AccountService(
        credentials=PostgresCredentialStore(pool),
        codes=PostgresCodeLedger(pool),
        email_sender=get_email_sender(request),
        token_issuer=SessionTokenIssuer(secret=settings.jwt_secret),
        hasher=PasswordHasher(cost=settings.bcrypt_cost),
        code_ttl=timedelta(seconds=settings.code_ttl_seconds),
    )


# Bearer security scheme for OpenAPI documentation; missing header is a domain AuthError
http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str | None:
    """
    Extract the token from an ``Authorization: Bearer`` header.

    Returns None when the header is missing or uses another scheme;
    the domain service reports that as an AuthError.
    """
    if credentials is None:
        return None
    return credentials.credentials
