"""
HTTP Boundary
=============
FastAPI router, bearer authentication and error mapping.
"""

from .routes import create_auth_router
from .dependencies import get_current_user_id, get_identity_service, get_token_issuer
from .errors import register_error_handlers

__all__ = [
    "create_auth_router",
    "get_current_user_id",
    "get_identity_service",
    "get_token_issuer",
    "register_error_handlers",
]
