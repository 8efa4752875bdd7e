"""
Password Hasher
===============
Argon2id password hasher construction.
"""

from functools import lru_cache
from typing import Optional

from argon2 import PasswordHasher, Type

from identity_core.config import HashingConfig


def build_hasher(config: Optional[HashingConfig] = None) -> PasswordHasher:
    """Build an Argon2id hasher with the configured work factor."""
    config = config or HashingConfig()
    return PasswordHasher(
        time_cost=config.time_cost,
        memory_cost=config.memory_cost,
        parallelism=config.parallelism,
        hash_len=config.hash_len,
        salt_len=config.salt_len,
        type=Type.ID,
    )


@lru_cache(maxsize=1)
def get_cached_hasher() -> PasswordHasher:
    """Get the default hasher (production settings, ~300ms per hash)."""
    return build_hasher()
