"""
One-Time Passcodes
==================
Secure OTP generation and single-use, purpose-scoped consumption.
"""

from .models import OTPPurpose, ConsumeResult, OTPConfig, OTPRecord
from .generator import generate_otp, is_well_formed
from .engine import OTPEngine

__all__ = [
    # Models
    "OTPPurpose",
    "ConsumeResult",
    "OTPConfig",
    "OTPRecord",
    # Generator
    "generate_otp",
    "is_well_formed",
    # Engine
    "OTPEngine",
]
