"""
OTP Generation
==============
Cryptographically secure numeric codes.
"""

import secrets

DIGITS = "0123456789"


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric OTP.

    Each digit is an independent uniform draw from the OS CSPRNG.

    Args:
        length: Number of digits

    Returns:
        OTP string, leading zeros preserved
    """
    if length < 1:
        raise ValueError("OTP length must be positive")
    return "".join(secrets.choice(DIGITS) for _ in range(length))


def is_well_formed(code: str, length: int = 6) -> bool:
    """Check a submitted code is exactly `length` ASCII digits."""
    return (
        isinstance(code, str)
        and len(code) == length
        and all(ch in DIGITS for ch in code)
    )
