"""
Async Password Hashing
======================
Secret hasher that keeps CPU-bound Argon2 work off the event loop.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import structlog
from argon2 import PasswordHasher

from identity_core.config import HashingConfig
from .hasher import build_hasher
from .sync_ops import hash_password_sync, verify_password_sync

logger = structlog.get_logger(__name__)

# Verified against when the account does not exist, so a miss costs the
# same as a wrong password.
_DUMMY_PASSWORD = "identity-core-timing-equaliser"


class SecretHasher:
    """
    One-way password hashing and verification.

    Hashing runs in a bounded thread pool so request handling is not
    starved while Argon2 burns CPU and memory.
    """

    def __init__(
        self,
        config: Optional[HashingConfig] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.config = config or HashingConfig()
        self._hasher = hasher or build_hasher(self.config)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="secret-hasher",
        )
        self._dummy_digest: Optional[str] = None

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def hash(self, plaintext: str) -> str:
        """
        Hash a password using Argon2id.

        Returns:
            Encoded hash (algorithm, parameters, salt and hash)

        Raises:
            ValueError: If the password is empty
        """
        return await self._run(hash_password_sync, plaintext, self._hasher)

    async def verify(self, digest: str, plaintext: str) -> bool:
        """Return True only if plaintext matches digest."""
        return await self._run(verify_password_sync, plaintext, digest, self._hasher)

    async def burn(self, plaintext: str) -> None:
        """Spend one verification's worth of work against a dummy digest."""
        if self._dummy_digest is None:
            self._dummy_digest = await self.hash(_DUMMY_PASSWORD)
        await self.verify(self._dummy_digest, plaintext)

    def close(self) -> None:
        """Shut down the worker pool."""
        self._executor.shutdown(wait=True)
        logger.debug("Secret hasher pool closed")
