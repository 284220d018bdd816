"""
In-memory test doubles for the domain ports.

They honor the same contracts as the PostgreSQL adapters: email uniqueness
is decided inside insert(), and delete_match() reports whether this call
removed the row. A lock stands in for the database's atomicity.
"""

import threading
from datetime import datetime, timedelta, timezone
from itertools import count

from src.domain.ports import Credential, OneTimeCode


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = count(1)
        self.rows: dict[str, Credential] = {}

    def find_by_email(self, email: str) -> Credential | None:
        return self.rows.get(email)

    def find_by_id(self, user_id: int) -> Credential | None:
        return next((c for c in self.rows.values() if c.id == user_id), None)

    def insert(
        self, name: str, email: str, password_hash: str, phone: str | None
    ) -> Credential | None:
        with self._lock:
            if email in self.rows:
                return None
            credential = Credential(
                id=next(self._ids),
                name=name,
                email=email,
                password_hash=password_hash,
                phone=phone,
            )
            self.rows[email] = credential
            return credential

    def set_verified(self, email: str) -> None:
        with self._lock:
            credential = self.rows.get(email)
            if credential is not None:
                self.rows[email] = Credential(
                    id=credential.id,
                    name=credential.name,
                    email=credential.email,
                    password_hash=credential.password_hash,
                    phone=credential.phone,
                    verified=True,
                )


class InMemoryCodeLedger:
    def __init__(self, clock: FrozenClock) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self.rows: list[OneTimeCode] = []

    def issue(self, email: str, code: str, expires_at: datetime) -> None:
        with self._lock:
            self.rows.append(
                OneTimeCode(email=email, code=code, expires_at=expires_at, created_at=self._clock())
            )

    def find_latest_match(self, email: str, code: str) -> OneTimeCode | None:
        # Later appends win ties on created_at
        matches = [r for r in self.rows if r.email == email and r.code == code]
        return matches[-1] if matches else None

    def find_latest(self, email: str) -> OneTimeCode | None:
        matches = [r for r in self.rows if r.email == email]
        return matches[-1] if matches else None

    def delete_match(self, email: str, code: str) -> bool:
        with self._lock:
            kept = [r for r in self.rows if not (r.email == email and r.code == code)]
            deleted = len(kept) != len(self.rows)
            self.rows = kept
            return deleted

    def for_email(self, email: str) -> list[OneTimeCode]:
        return [r for r in self.rows if r.email == email]


class RecordingEmailSender:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_verification_code(self, email: str, code: str) -> None:
        self.sent.append((email, code))


class FailingEmailSender:
    def send_verification_code(self, email: str, code: str) -> None:
        raise ConnectionRefusedError("smtp.example.com:587 refused connection")
