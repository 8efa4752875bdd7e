"""
Request and response bodies for the account endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

OTP_PATTERN = r"^[0-9]{6}$"


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255, examples=["John Doe"])
    email: EmailStr = Field(examples=["john@example.com"])
    password: str = Field(min_length=6, max_length=1024)


class VerifyOTPRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=1024)
    otp: str = Field(pattern=OTP_PATTERN, examples=["123456"])


class LoginRequest(BaseModel):
    # malformed emails fail as bad credentials, not as validation errors
    email: str = Field(max_length=320)
    password: str = Field(max_length=1024)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=OTP_PATTERN)
    new_password: str = Field(min_length=6, max_length=1024)


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    verified: bool
    created_at: datetime


class ErrorResponse(BaseModel):
    error: str
    message: str
