"""
Credential Store Interface
==========================
Persistence boundary for users and OTPs.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from identity_core.models import User
from identity_core.otp.models import OTPPurpose, OTPRecord


class CredentialStore(ABC):
    """
    Async persistence for User and OTP records.

    Implementations must make `consume_otp_atomic` a single indivisible
    check-and-mark operation.
    """

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def insert_user(self, user: User) -> None:
        """
        Persist a new user.

        Raises:
            DuplicateUser: If the email is already registered
        """

    @abstractmethod
    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Replace a user's password hash. Returns False if no such user."""

    @abstractmethod
    async def insert_otp(self, otp: OTPRecord) -> None:
        ...

    @abstractmethod
    async def consume_otp_atomic(
        self,
        email: str,
        code: str,
        purpose: OTPPurpose,
        now: datetime,
    ) -> bool:
        """
        Mark a live OTP used if one matches.

        Matches on email, code and purpose with used=False and
        expires_at > now, and flips used in the same operation.

        Returns:
            True if a record was consumed
        """

    @abstractmethod
    async def delete_expired_otps(self, now: datetime) -> int:
        """Remove OTPs whose expiry has passed. Returns the count removed."""

    async def close(self) -> None:
        """Release resources held by the store."""
