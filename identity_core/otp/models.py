"""
OTP Models
==========
Data models and enums for one-time codes.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OTPPurpose(str, Enum):
    """The flow an OTP is scoped to."""
    SIGNUP = "signup"
    PASSWORD_RESET = "password_reset"


class ConsumeResult(str, Enum):
    """Outcome of an atomic consume attempt."""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class OTPConfig:
    """Configuration for OTP generation."""
    length: int = 6
    ttl: timedelta = timedelta(minutes=10)


@dataclass
class OTPRecord:
    """A persisted one-time code."""
    email: str
    code: str
    purpose: OTPPurpose
    expires_at: datetime
    used: bool = False
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def is_valid(self, now: datetime) -> bool:
        return not self.used and now < self.expires_at

    def matches(self, email: str, code: str, purpose: OTPPurpose) -> bool:
        return self.email == email and self.code == code and self.purpose == purpose
