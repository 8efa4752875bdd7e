"""
Identity Errors
===============
Closed set of typed failures raised by the identity core.

Each error carries a stable ``code`` and the HTTP status the boundary layer
maps it to. Several internal causes deliberately collapse into one error
(unknown email vs. wrong password, wrong vs. expired vs. used OTP) so callers
cannot use the responses as an enumeration oracle.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable error identifiers exposed to clients."""
    VALIDATION_ERROR = "validation_error"
    DUPLICATE_USER = "duplicate_user"
    USER_NOT_FOUND = "user_not_found"
    NOT_FOUND = "not_found"
    INVALID_OTP = "invalid_otp"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_VERIFIED = "not_verified"
    INVALID_TOKEN = "invalid_token"
    UPSTREAM_FAILURE = "upstream_failure"


class IdentityError(Exception):
    """Base exception for all identity core failures."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status_code: int = 400
    public_message: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        # detail is for logs only, never returned to clients
        self.detail = detail or self.public_message
        super().__init__(f"[{self.code.value}] {self.detail}")


class ValidationError(IdentityError):
    """Malformed input, rejected before touching the store."""
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    public_message = "Invalid request"


class DuplicateUser(IdentityError):
    """An account is already registered for this email."""
    code = ErrorCode.DUPLICATE_USER
    status_code = 409
    public_message = "An account with this email already exists"


class UserNotFound(IdentityError):
    """No account exists for this email."""
    code = ErrorCode.USER_NOT_FOUND
    status_code = 404
    public_message = "User not found"


class NotFound(IdentityError):
    """Requested resource does not exist."""
    code = ErrorCode.NOT_FOUND
    status_code = 404
    public_message = "Not found"


class InvalidOTP(IdentityError):
    """OTP is wrong, expired, already used or issued for another purpose."""
    code = ErrorCode.INVALID_OTP
    status_code = 400
    public_message = "Invalid or expired OTP"


class InvalidCredentials(IdentityError):
    """Unknown email or wrong password."""
    code = ErrorCode.INVALID_CREDENTIALS
    status_code = 401
    public_message = "Invalid credentials"


class NotVerified(IdentityError):
    """Account exists but its email has not been verified."""
    code = ErrorCode.NOT_VERIFIED
    status_code = 401
    public_message = "Please verify your email first"


class InvalidToken(IdentityError):
    """Bearer token is missing, malformed, forged or expired."""
    code = ErrorCode.INVALID_TOKEN
    status_code = 401
    public_message = "Invalid token"


class UpstreamDependencyFailure(IdentityError):
    """An out-of-process dependency (email transport) failed."""
    code = ErrorCode.UPSTREAM_FAILURE
    status_code = 502
    public_message = "A dependent service is unavailable. Please try again later."

    def __init__(self, detail: Optional[str] = None, service: str = "unknown"):
        self.service = service
        super().__init__(detail)


__all__ = [
    "ErrorCode",
    "IdentityError",
    "ValidationError",
    "DuplicateUser",
    "UserNotFound",
    "NotFound",
    "InvalidOTP",
    "InvalidCredentials",
    "NotVerified",
    "InvalidToken",
    "UpstreamDependencyFailure",
]
