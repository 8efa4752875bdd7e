"""
In-Memory Credential Store
==========================
Dict-backed store for development and testing.
"""

import asyncio
import copy
from datetime import datetime
from typing import Dict, List, Optional

import structlog

from identity_core.errors import DuplicateUser
from identity_core.models import User
from identity_core.otp.models import OTPPurpose, OTPRecord
from .base import CredentialStore

logger = structlog.get_logger(__name__)


class InMemoryCredentialStore(CredentialStore):
    """
    Process-local credential store.

    For development and testing only.
    Use SQLCredentialStore in production.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._otps: List[OTPRecord] = []
        self._lock = asyncio.Lock()

    async def find_user_by_email(self, email: str) -> Optional[User]:
        user_id = self._ids_by_email.get(email)
        if user_id is None:
            return None
        return copy.copy(self._users[user_id])

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return copy.copy(user) if user else None

    async def insert_user(self, user: User) -> None:
        async with self._lock:
            if user.email in self._ids_by_email:
                raise DuplicateUser("email already registered")
            self._users[user.id] = copy.copy(user)
            self._ids_by_email[user.email] = user.id

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            user.password_hash = password_hash
            return True

    async def insert_otp(self, otp: OTPRecord) -> None:
        async with self._lock:
            self._otps.append(copy.copy(otp))

    async def consume_otp_atomic(
        self,
        email: str,
        code: str,
        purpose: OTPPurpose,
        now: datetime,
    ) -> bool:
        async with self._lock:
            matched = False
            for otp in self._otps:
                if otp.matches(email, code, purpose) and otp.is_valid(now):
                    otp.used = True
                    matched = True
            return matched

    async def delete_expired_otps(self, now: datetime) -> int:
        async with self._lock:
            before = len(self._otps)
            self._otps = [otp for otp in self._otps if otp.expires_at >= now]
            removed = before - len(self._otps)
        if removed:
            logger.info("Expired OTPs purged", count=removed)
        return removed

    def otps_for(self, email: str) -> List[OTPRecord]:
        """Snapshot of OTP records for an email (test inspection)."""
        return [copy.copy(otp) for otp in self._otps if otp.email == email]
