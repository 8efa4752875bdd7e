"""
Request Dependencies
====================
Service lookup and bearer authentication for route handlers.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity_core.errors import InvalidToken
from identity_core.service import IdentityService
from identity_core.tokens import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False, description="Access token: Bearer <token>")


def get_identity_service(request: Request) -> IdentityService:
    return request.app.state.identity_service


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """
    Resolve the authenticated user id from the Authorization header.

    Raises:
        InvalidToken: Header missing or not a Bearer credential, or the token
            fails verification
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidToken("missing or malformed authorization header")
    return issuer.subject_of(credentials.credentials)
