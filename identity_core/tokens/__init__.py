"""
Bearer Tokens
=============
Stateless signed tokens identifying an authenticated user.
"""

from .models import TokenType, TokenClaims, TokenPair
from .issuer import TokenIssuer

__all__ = [
    "TokenType",
    "TokenClaims",
    "TokenPair",
    "TokenIssuer",
]
