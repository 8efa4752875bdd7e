"""
Identity Core Configuration
===========================
Settings read from environment variables at startup.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
MIN_SECRET_LENGTH = 32


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a valid integer") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a valid number") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EmailConfig:
    """SMTP transport settings."""
    host: str = "localhost"
    port: int = 587
    username: str = ""
    password: str = ""
    use_tls: bool = True
    from_address: str = ""
    timeout: float = 10.0

    @property
    def sender(self) -> str:
        return self.from_address or self.username


@dataclass
class HashingConfig:
    """Argon2id work factor. Raise these as hardware allows."""
    time_cost: int = 3          # iterations
    memory_cost: int = 65536    # KiB (64MB)
    parallelism: int = 4
    hash_len: int = 32
    salt_len: int = 16
    max_workers: int = 4        # hashing thread pool size


@dataclass
class IdentityConfig:
    """Top-level configuration for the identity service."""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(minutes=15)
    refresh_token_ttl: timedelta = timedelta(days=7)
    otp_ttl: timedelta = timedelta(minutes=10)
    database_url: str = "sqlite+aiosqlite:///./identity.db"
    service_name: str = "identity-core"
    log_level: str = "INFO"
    log_json: bool = True
    email: EmailConfig = field(default_factory=EmailConfig)
    hashing: HashingConfig = field(default_factory=HashingConfig)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Fail closed on unusable settings."""
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET environment variable is required")
        if len(self.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters"
            )
        if self.jwt_algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        for name in ("access_token_ttl", "refresh_token_ttl", "otp_ttl"):
            if getattr(self, name) <= timedelta(0):
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_env(cls, jwt_secret: Optional[str] = None) -> "IdentityConfig":
        """
        Build configuration from the process environment.

        Args:
            jwt_secret: Explicit secret, overrides JWT_SECRET

        Raises:
            ValueError: If a required variable is missing or malformed
        """
        email = EmailConfig(
            host=os.getenv("EMAIL_HOST", "localhost"),
            port=_env_int("EMAIL_PORT", 587),
            username=os.getenv("EMAIL_HOST_USER", ""),
            password=os.getenv("EMAIL_HOST_PASSWORD", ""),
            use_tls=_env_bool("EMAIL_USE_TLS", True),
            from_address=os.getenv("EMAIL_FROM", ""),
            timeout=_env_float("EMAIL_TIMEOUT", 10.0),
        )
        hashing = HashingConfig(
            time_cost=_env_int("ARGON2_TIME_COST", 3),
            memory_cost=_env_int("ARGON2_MEMORY_COST", 65536),
            parallelism=_env_int("ARGON2_PARALLELISM", 4),
            max_workers=_env_int("HASHER_MAX_WORKERS", 4),
        )
        return cls(
            jwt_secret=jwt_secret if jwt_secret is not None else os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256").upper(),
            access_token_ttl=timedelta(minutes=_env_int("ACCESS_TOKEN_TTL_MINUTES", 15)),
            refresh_token_ttl=timedelta(days=_env_int("REFRESH_TOKEN_TTL_DAYS", 7)),
            otp_ttl=timedelta(minutes=_env_int("OTP_TTL_MINUTES", 10)),
            database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./identity.db"),
            service_name=os.getenv("SERVICE_NAME", "identity-core"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=_env_bool("LOG_JSON", True),
            email=email,
            hashing=hashing,
        )
