"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- In-memory stores implementing the domain ports
- An AccountService wired to those fakes
"""

import pytest

from src.domain.accounts import AccountService
from src.domain.passwords import PasswordHasher
from src.domain.tokens import SessionTokenIssuer
from tests.fakes import (
    FrozenClock,
    InMemoryCodeLedger,
    InMemoryCredentialStore,
    RecordingEmailSender,
)

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def credentials() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def codes(clock: FrozenClock) -> InMemoryCodeLedger:
    return InMemoryCodeLedger(clock)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def token_issuer(clock: FrozenClock) -> SessionTokenIssuer:
    return SessionTokenIssuer(secret=TEST_SECRET, clock=clock)


@pytest.fixture
def service(
    credentials: InMemoryCredentialStore,
    codes: InMemoryCodeLedger,
    email_sender: RecordingEmailSender,
    token_issuer: SessionTokenIssuer,
    clock: FrozenClock,
) -> AccountService:
    """Account service on in-memory fakes; bcrypt cost lowered for speed."""
    return AccountService(
        credentials=credentials,
        codes=codes,
        email_sender=email_sender,
        token_issuer=token_issuer,
        hasher=PasswordHasher(cost=4),
        clock=clock,
    )
