"""
Account Routes
==============
HTTP endpoints for signup, verification, login and password recovery.
"""

from fastapi import APIRouter, Depends, status

from identity_core.service import IdentityService
from .dependencies import get_current_user_id, get_identity_service
from .schemas import (
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ResetPasswordRequest,
    SignupRequest,
    TokenResponse,
    VerifyOTPRequest,
)


def create_auth_router() -> APIRouter:
    """Build the account router. Mount without a prefix for the public paths."""
    router = APIRouter(
        tags=["auth"],
        responses={400: {"model": ErrorResponse}},
    )

    @router.post("/signup", response_model=MessageResponse)
    async def signup(
        body: SignupRequest,
        service: IdentityService = Depends(get_identity_service),
    ):
        """Start signup by emailing a verification OTP."""
        await service.sign_up(body.name, body.email, body.password)
        return MessageResponse(
            message="OTP sent to your email. Please verify to complete registration."
        )

    @router.post(
        "/verify-otp",
        response_model=MessageResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def verify_otp(
        body: VerifyOTPRequest,
        service: IdentityService = Depends(get_identity_service),
    ):
        """Verify the signup OTP and create the account."""
        await service.verify_signup(body.email, body.otp, body.name, body.password)
        return MessageResponse(message="Account verified successfully. You can now login.")

    @router.post(
        "/login",
        response_model=TokenResponse,
        responses={401: {"model": ErrorResponse}},
    )
    async def login(
        body: LoginRequest,
        service: IdentityService = Depends(get_identity_service),
    ):
        pair = await service.login(body.email, body.password)
        return TokenResponse(**pair.to_dict())

    @router.post("/forgot-password", response_model=MessageResponse)
    async def forgot_password(
        body: ForgotPasswordRequest,
        service: IdentityService = Depends(get_identity_service),
    ):
        await service.forgot_password(body.email)
        return MessageResponse(message="Password reset OTP sent to your email.")

    @router.post("/reset-password", response_model=MessageResponse)
    async def reset_password(
        body: ResetPasswordRequest,
        service: IdentityService = Depends(get_identity_service),
    ):
        await service.reset_password(body.email, body.otp, body.new_password)
        return MessageResponse(
            message="Password reset successfully. You can now login with your new password."
        )

    @router.get(
        "/profile",
        response_model=ProfileResponse,
        responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    async def profile(
        user_id: str = Depends(get_current_user_id),
        service: IdentityService = Depends(get_identity_service),
    ):
        """Return the authenticated user's profile."""
        return await service.get_profile(user_id)

    return router
