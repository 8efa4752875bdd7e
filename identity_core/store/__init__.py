"""
Credential Store
================
Persistence for users and one-time codes.
"""

from .base import CredentialStore
from .memory import InMemoryCredentialStore
from .database import Base, create_async_engine, create_session_factory, create_schema, close_engine
from .sql import SQLCredentialStore, UserRow, OTPRow

__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "SQLCredentialStore",
    "UserRow",
    "OTPRow",
    "Base",
    "create_async_engine",
    "create_session_factory",
    "create_schema",
    "close_engine",
]
