"""
Shared fixtures for identity-core tests.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

import pytest

from identity_core.config import HashingConfig, IdentityConfig
from identity_core.errors import UpstreamDependencyFailure
from identity_core.mail import EmailSender
from identity_core.otp import OTPEngine
from identity_core.password import SecretHasher
from identity_core.service import IdentityService
from identity_core.store import InMemoryCredentialStore
from identity_core.tokens import TokenIssuer

TEST_SECRET = "test-secret-" + "k" * 52

FAST_HASHING = HashingConfig(time_cost=1, memory_cost=8, parallelism=1, max_workers=2)

_CODE_PATTERN = re.compile(r"<strong>(\d{6})</strong>")


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingEmailSender(EmailSender):
    """Captures outgoing email instead of sending it."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Tuple[str, str, str]] = []
        self.attempts = 0

    async def send(self, to: str, subject: str, html_body: str) -> None:
        self.attempts += 1
        if self.fail:
            raise UpstreamDependencyFailure("smtp down", service="smtp")
        self.sent.append((to, subject, html_body))

    def last_code(self, to: str) -> str:
        for recipient, _, body in reversed(self.sent):
            if recipient == to:
                return _CODE_PATTERN.search(body).group(1)
        raise AssertionError(f"no email sent to {to}")


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def hasher():
    secret_hasher = SecretHasher(FAST_HASHING)
    yield secret_hasher
    secret_hasher.close()


@pytest.fixture
def otp_engine(store, clock):
    return OTPEngine(store, clock=clock)


@pytest.fixture
def issuer(clock):
    return TokenIssuer(TEST_SECRET, clock=clock)


@pytest.fixture
def mailer():
    return RecordingEmailSender()


@pytest.fixture
def service(store, otp_engine, hasher, issuer, mailer):
    return IdentityService(
        store=store,
        otp_engine=otp_engine,
        hasher=hasher,
        tokens=issuer,
        email_sender=mailer,
    )


@pytest.fixture
def config():
    return IdentityConfig(jwt_secret=TEST_SECRET, hashing=FAST_HASHING, log_json=False)
