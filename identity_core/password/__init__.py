"""
Password Hashing
================
Argon2id password hashing with legacy bcrypt verification.

- Memory-hard and tunable (time, memory, parallelism)
- Malformed digests verify as False, never raise
- Async-safe: runs in a bounded thread pool
"""

from .hasher import build_hasher, get_cached_hasher
from .sync_ops import hash_password_sync, verify_password_sync
from .async_ops import SecretHasher

__all__ = [
    "build_hasher",
    "get_cached_hasher",
    "hash_password_sync",
    "verify_password_sync",
    "SecretHasher",
]
