"""
OTP Email Templates
===================
Subject and HTML body for each OTP purpose.
"""

from typing import Tuple

from identity_core.otp.models import OTPPurpose

_SIGNUP_BODY = """
<h2>Email Verification</h2>
<p>Your OTP for signup is: <strong>{code}</strong></p>
<p>This code will expire in {minutes} minutes.</p>
<p>If you didn't request this, please ignore this email.</p>
"""

_RESET_BODY = """
<h2>Password Reset</h2>
<p>Your OTP for password reset is: <strong>{code}</strong></p>
<p>This code will expire in {minutes} minutes.</p>
<p>If you didn't request this, please ignore this email.</p>
"""


def render_otp_email(code: str, purpose: OTPPurpose, ttl_minutes: int = 10) -> Tuple[str, str]:
    """
    Render the email carrying an OTP.

    Returns:
        Tuple of (subject, html_body)
    """
    if purpose is OTPPurpose.PASSWORD_RESET:
        return "Reset Your Password", _RESET_BODY.format(code=code, minutes=ttl_minutes)
    return "Verify Your Email", _SIGNUP_BODY.format(code=code, minutes=ttl_minutes)
