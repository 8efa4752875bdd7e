"""
Token Models
============
Claims carried by signed bearer tokens.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenType(str, Enum):
    """Token flavours. They differ only in lifetime."""
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token."""
    subject: str
    issued_at: datetime
    expires_at: datetime
    token_type: TokenType = TokenType.ACCESS


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens minted on login."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
        }
