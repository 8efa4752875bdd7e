"""
Sync Password Operations
========================
Blocking hash/verify primitives. Run these off the event loop.
"""

from typing import Optional

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from .hasher import get_cached_hasher

ARGON2_PREFIX = "$argon2"
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password_sync(password: str, hasher: Optional[PasswordHasher] = None) -> str:
    """Hash a password with Argon2id."""
    if not password:
        raise ValueError("Password cannot be empty")
    hasher = hasher or get_cached_hasher()
    return hasher.hash(password)


def verify_password_sync(
    password: str,
    digest: str,
    hasher: Optional[PasswordHasher] = None,
) -> bool:
    """
    Verify a password against an Argon2id or legacy bcrypt digest.

    A malformed or unrecognised digest reports False, same as a mismatch.
    """
    if not password or not digest:
        return False

    if digest.startswith(ARGON2_PREFIX):
        hasher = hasher or get_cached_hasher()
        try:
            return hasher.verify(digest, password)
        except (VerificationError, InvalidHashError):
            # VerifyMismatchError is a VerificationError subclass
            return False

    if digest.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            # invalid salt / truncated digest
            return False

    return False
