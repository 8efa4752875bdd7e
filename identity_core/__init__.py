"""
Identity Core
=============
OTP-gated signup, credential verification, password recovery and bearer
token issuance.
"""

__version__ = "0.1.0"

# Errors
from identity_core.errors import (
    ErrorCode,
    IdentityError,
    ValidationError,
    DuplicateUser,
    UserNotFound,
    NotFound,
    InvalidOTP,
    InvalidCredentials,
    NotVerified,
    InvalidToken,
    UpstreamDependencyFailure,
)

# Config
from identity_core.config import IdentityConfig, EmailConfig, HashingConfig

# Models
from identity_core.models import User

# OTP
from identity_core.otp import OTPEngine, OTPPurpose, OTPConfig, OTPRecord, ConsumeResult

# Password
from identity_core.password import SecretHasher

# Tokens
from identity_core.tokens import TokenIssuer, TokenClaims, TokenPair, TokenType

# Store
from identity_core.store import CredentialStore, InMemoryCredentialStore, SQLCredentialStore

# Email
from identity_core.mail import EmailSender, SMTPEmailSender

# Service
from identity_core.service import IdentityService

__all__ = [
    "__version__",
    # Errors
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
    # Config
    "IdentityConfig",
    "EmailConfig",
    "HashingConfig",
    # Models
    "User",
    # OTP
    "OTPEngine",
    "OTPPurpose",
    "OTPConfig",
    "OTPRecord",
    "ConsumeResult",
    # Password
    "SecretHasher",
    # Tokens
    "TokenIssuer",
    "TokenClaims",
    "TokenPair",
    "TokenType",
    # Store
    "CredentialStore",
    "InMemoryCredentialStore",
    "SQLCredentialStore",
    # Email
    "EmailSender",
    "SMTPEmailSender",
    # Service
    "IdentityService",
]
