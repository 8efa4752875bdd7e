"""
Token Issuer
============
Mints and verifies HMAC-signed JWT bearer tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
import structlog

from identity_core.config import SUPPORTED_ALGORITHMS
from identity_core.errors import InvalidToken
from .models import TokenClaims, TokenPair, TokenType

logger = structlog.get_logger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    Signs and validates bearer tokens with one secret and one pinned
    algorithm.

    The algorithm is fixed at construction; a token whose header names any
    other algorithm (including "none") is rejected before its signature is
    considered.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ValueError("Token signing secret cannot be empty")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock

    def issue(
        self,
        user_id: str,
        ttl: timedelta,
        token_type: TokenType = TokenType.ACCESS,
    ) -> str:
        """
        Mint a signed token for a subject.

        Args:
            user_id: Subject identifier
            ttl: Lifetime from now
            token_type: Informational flavour claim

        Returns:
            Encoded JWT
        """
        issued_at = int(self.clock().timestamp())
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
            "type": token_type.value,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue_pair(self, user_id: str) -> TokenPair:
        """Mint an access and a refresh token for a subject."""
        return TokenPair(
            access_token=self.issue(user_id, self.access_ttl, TokenType.ACCESS),
            refresh_token=self.issue(user_id, self.refresh_ttl, TokenType.REFRESH),
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Validate a token and return its claims.

        Raises:
            InvalidToken: Malformed, wrong algorithm, bad signature, missing
                claims, or expired
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise InvalidToken("malformed token") from e

        if header.get("alg") != self.algorithm:
            logger.warning("Token algorithm rejected", alg=header.get("alg"))
            raise InvalidToken("unexpected signing algorithm")

        try:
            # expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.warning("Token rejected", reason=type(e).__name__)
            raise InvalidToken(str(e)) from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("invalid subject")

        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            token_type = TokenType(payload.get("type", TokenType.ACCESS.value))
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidToken("invalid claims") from e

        if self.clock() >= expires_at:
            raise InvalidToken("token expired")

        return TokenClaims(
            subject=subject,
            issued_at=issued_at,
            expires_at=expires_at,
            token_type=token_type,
        )

    def subject_of(self, token: Optional[str]) -> str:
        """Verify a token and return only its subject."""
        if not token:
            raise InvalidToken("missing token")
        return self.verify(token).subject
