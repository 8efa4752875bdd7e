"""
Email Delivery
==============
OTP email rendering and SMTP transport.
"""

from .sender import EmailSender, SMTPEmailSender, mask_email
from .templates import render_otp_email

__all__ = [
    "EmailSender",
    "SMTPEmailSender",
    "mask_email",
    "render_otp_email",
]
