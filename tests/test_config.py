"""
Tests for environment configuration.
"""

from datetime import timedelta

import pytest

from identity_core.config import IdentityConfig

from conftest import TEST_SECRET

ENV_VARS = (
    "JWT_SECRET", "JWT_ALGORITHM", "ACCESS_TOKEN_TTL_MINUTES", "REFRESH_TOKEN_TTL_DAYS",
    "OTP_TTL_MINUTES", "DATABASE_URL", "EMAIL_HOST", "EMAIL_PORT", "EMAIL_HOST_USER",
    "EMAIL_USE_TLS", "EMAIL_FROM", "LOG_JSON", "ARGON2_TIME_COST",
    "EMAIL_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestIdentityConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)

        config = IdentityConfig.from_env()

        assert config.jwt_algorithm == "HS256"
        assert config.access_token_ttl == timedelta(minutes=15)
        assert config.refresh_token_ttl == timedelta(days=7)
        assert config.otp_ttl == timedelta(minutes=10)
        assert config.email.port == 587
        assert config.email.use_tls is True
        assert config.hashing.time_cost == 3

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.setenv("JWT_ALGORITHM", "hs512")
        monkeypatch.setenv("ACCESS_TOKEN_TTL_MINUTES", "5")
        monkeypatch.setenv("OTP_TTL_MINUTES", "3")
        monkeypatch.setenv("EMAIL_HOST_USER", "noreply@x.io")
        monkeypatch.setenv("EMAIL_USE_TLS", "false")
        monkeypatch.setenv("LOG_JSON", "0")

        config = IdentityConfig.from_env()

        assert config.jwt_algorithm == "HS512"
        assert config.access_token_ttl == timedelta(minutes=5)
        assert config.otp_ttl == timedelta(minutes=3)
        assert config.email.sender == "noreply@x.io"
        assert config.email.use_tls is False
        assert config.log_json is False

    def test_explicit_secret_wins(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "x" * 40)

        assert IdentityConfig.from_env(jwt_secret=TEST_SECRET).jwt_secret == TEST_SECRET

    def test_missing_secret(self):
        with pytest.raises(ValueError, match="JWT_SECRET"):
            IdentityConfig.from_env()

    def test_short_secret(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "too-short")

        with pytest.raises(ValueError, match="at least 32"):
            IdentityConfig.from_env()

    def test_unsupported_algorithm(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.setenv("JWT_ALGORITHM", "none")

        with pytest.raises(ValueError, match="JWT_ALGORITHM"):
            IdentityConfig.from_env()

    def test_non_integer_ttl(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.setenv("OTP_TTL_MINUTES", "ten")

        with pytest.raises(ValueError, match="OTP_TTL_MINUTES"):
            IdentityConfig.from_env()

    def test_email_timeout(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.setenv("EMAIL_TIMEOUT", "2.5")

        assert IdentityConfig.from_env().email.timeout == 2.5

    def test_non_numeric_email_timeout(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.setenv("EMAIL_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="EMAIL_TIMEOUT must be a valid number"):
            IdentityConfig.from_env()

    def test_non_positive_ttl(self):
        with pytest.raises(ValueError, match="otp_ttl"):
            IdentityConfig(jwt_secret=TEST_SECRET, otp_ttl=timedelta(0))
