"""
Tests for OTP generation and consumption.
"""

import asyncio
from datetime import timedelta

import pytest

from identity_core.errors import InvalidOTP
from identity_core.otp import ConsumeResult, OTPPurpose, generate_otp, is_well_formed


class TestGenerator:
    """Code generation."""

    def test_generate_numeric_six_digits(self):
        """Should generate six ASCII digits."""
        code = generate_otp()

        assert len(code) == 6
        assert is_well_formed(code)

    def test_generate_custom_length(self):
        assert len(generate_otp(8)) == 8

    def test_invalid_length_rejected(self):
        with pytest.raises(ValueError):
            generate_otp(0)

    def test_digits_cover_full_range(self):
        """Every digit should appear in a large sample."""
        sample = "".join(generate_otp() for _ in range(500))

        assert set(sample) == set("0123456789")

    @pytest.mark.parametrize("code", ["12345", "1234567", "12a456", "", "１２３４５６", None])
    def test_malformed_codes(self, code):
        assert is_well_formed(code) is False


class TestOTPEngine:
    """Issue and atomic consume."""

    @pytest.mark.asyncio
    async def test_issue_persists_record(self, otp_engine, store, clock):
        """Should store an unused record expiring in ten minutes."""
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        [record] = store.otps_for("ann@x.io")
        assert record.code == code
        assert record.purpose is OTPPurpose.SIGNUP
        assert record.used is False
        assert record.created_at == clock.now
        assert record.expires_at == clock.now + timedelta(minutes=10)

    @pytest.mark.asyncio
    async def test_consume_once(self, otp_engine):
        """Second consume of the same code should fail."""
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        assert await otp_engine.consume("ann@x.io", code, OTPPurpose.SIGNUP) is ConsumeResult.VALID
        with pytest.raises(InvalidOTP):
            await otp_engine.consume("ann@x.io", code, OTPPurpose.SIGNUP)

    @pytest.mark.asyncio
    async def test_wrong_purpose_rejected(self, otp_engine):
        """A signup code should not work for password reset."""
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        assert await otp_engine.check("ann@x.io", code, OTPPurpose.PASSWORD_RESET) is ConsumeResult.INVALID
        # still live for its own purpose
        assert await otp_engine.check("ann@x.io", code, OTPPurpose.SIGNUP) is ConsumeResult.VALID

    @pytest.mark.asyncio
    async def test_wrong_email_rejected(self, otp_engine):
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        assert await otp_engine.check("bob@x.io", code, OTPPurpose.SIGNUP) is ConsumeResult.INVALID

    @pytest.mark.asyncio
    async def test_wrong_code_rejected(self, otp_engine):
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(InvalidOTP):
            await otp_engine.consume("ann@x.io", wrong, OTPPurpose.SIGNUP)

    @pytest.mark.asyncio
    async def test_malformed_code_never_reaches_store(self, otp_engine):
        assert await otp_engine.check("ann@x.io", "12ab56", OTPPurpose.SIGNUP) is ConsumeResult.INVALID

    @pytest.mark.asyncio
    async def test_valid_just_before_expiry(self, otp_engine, clock):
        """Should still accept the code one microsecond before expiry."""
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)
        clock.advance(timedelta(minutes=10) - timedelta(microseconds=1))

        assert await otp_engine.check("ann@x.io", code, OTPPurpose.SIGNUP) is ConsumeResult.VALID

    @pytest.mark.asyncio
    async def test_invalid_at_and_after_expiry(self, otp_engine, clock):
        """Should reject the code at expiry and one microsecond after."""
        at_expiry = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)
        after_expiry = await otp_engine.issue("ann@x.io", OTPPurpose.PASSWORD_RESET)
        clock.advance(timedelta(minutes=10))

        assert await otp_engine.check("ann@x.io", at_expiry, OTPPurpose.SIGNUP) is ConsumeResult.INVALID

        clock.advance(timedelta(microseconds=1))
        assert await otp_engine.check(
            "ann@x.io", after_expiry, OTPPurpose.PASSWORD_RESET
        ) is ConsumeResult.INVALID

    @pytest.mark.asyncio
    async def test_multiple_live_codes_coexist(self, otp_engine):
        """Issuing a new code should not invalidate the previous one."""
        first = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)
        second = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        if first != second:
            assert await otp_engine.check("ann@x.io", first, OTPPurpose.SIGNUP) is ConsumeResult.VALID
        assert await otp_engine.check("ann@x.io", second, OTPPurpose.SIGNUP) is ConsumeResult.VALID

    @pytest.mark.asyncio
    async def test_concurrent_consume_has_single_winner(self, otp_engine):
        """N racing consumes of one code should yield exactly one VALID."""
        code = await otp_engine.issue("ann@x.io", OTPPurpose.PASSWORD_RESET)

        results = await asyncio.gather(*[
            otp_engine.check("ann@x.io", code, OTPPurpose.PASSWORD_RESET)
            for _ in range(25)
        ])

        assert results.count(ConsumeResult.VALID) == 1
        assert results.count(ConsumeResult.INVALID) == 24

    @pytest.mark.asyncio
    async def test_concurrent_consume_raising_form(self, otp_engine):
        code = await otp_engine.issue("ann@x.io", OTPPurpose.SIGNUP)

        results = await asyncio.gather(
            *[otp_engine.consume("ann@x.io", code, OTPPurpose.SIGNUP) for _ in range(10)],
            return_exceptions=True,
        )

        assert sum(1 for r in results if r is ConsumeResult.VALID) == 1
        assert sum(1 for r in results if isinstance(r, InvalidOTP)) == 9
