"""
OTP Engine
==========
Issues time-bound codes and consumes them exactly once.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

import structlog

from identity_core.errors import InvalidOTP
from .models import ConsumeResult, OTPConfig, OTPPurpose, OTPRecord, utcnow
from .generator import generate_otp, is_well_formed

if TYPE_CHECKING:
    from identity_core.store.base import CredentialStore

logger = structlog.get_logger(__name__)


class OTPEngine:
    """
    Generates, stores and atomically consumes OTPs scoped to
    (email, purpose).

    Issuing never invalidates earlier codes; several may be live at once and
    a consume matches on the exact code.
    """

    def __init__(
        self,
        store: "CredentialStore",
        config: Optional[OTPConfig] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.config = config or OTPConfig()
        self.clock = clock

    async def issue(self, email: str, purpose: OTPPurpose) -> str:
        """
        Create and persist a new OTP.

        Args:
            email: Normalised email the code is bound to
            purpose: Flow the code is valid for

        Returns:
            The plaintext code, for delivery
        """
        now = self.clock()
        record = OTPRecord(
            email=email,
            code=generate_otp(self.config.length),
            purpose=purpose,
            expires_at=now + self.config.ttl,
            created_at=now,
        )
        await self.store.insert_otp(record)

        logger.info(
            "OTP issued",
            otp_id=record.id,
            purpose=purpose.value,
            expires_in=int(self.config.ttl.total_seconds()),
        )
        return record.code

    async def check(self, email: str, code: str, purpose: OTPPurpose) -> ConsumeResult:
        """
        Consume a code if it is live, without raising.

        The store performs match-and-mark-used as one conditional update, so
        of several concurrent callers presenting the same code only one
        sees VALID.
        """
        if not is_well_formed(code, self.config.length):
            return ConsumeResult.INVALID

        matched = await self.store.consume_otp_atomic(email, code, purpose, self.clock())
        if matched:
            logger.info("OTP consumed", purpose=purpose.value)
            return ConsumeResult.VALID

        logger.warning("OTP rejected", purpose=purpose.value)
        return ConsumeResult.INVALID

    async def consume(self, email: str, code: str, purpose: OTPPurpose) -> ConsumeResult:
        """
        Consume a code or fail.

        Raises:
            InvalidOTP: Wrong code, wrong purpose, expired or already used
        """
        result = await self.check(email, code, purpose)
        if result is not ConsumeResult.VALID:
            raise InvalidOTP("no live OTP matched")
        return result
