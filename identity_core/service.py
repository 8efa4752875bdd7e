"""
Identity Service
================
Signup, verification, login and password recovery.

Account state per email:

    Unregistered -> PendingVerification -> Verified

PendingVerification is nothing more than a live signup OTP; a user row is
written only once that OTP is consumed, so abandoned signups leave no
partial accounts behind.
"""

from typing import Any, Dict

import structlog
from email_validator import EmailNotValidError, validate_email

from identity_core.errors import (
    DuplicateUser,
    InvalidCredentials,
    NotFound,
    NotVerified,
    UserNotFound,
    ValidationError,
)
from identity_core.mail import EmailSender, mask_email, render_otp_email
from identity_core.models import User
from identity_core.otp import OTPEngine, OTPPurpose, is_well_formed
from identity_core.password import SecretHasher
from identity_core.store import CredentialStore
from identity_core.tokens import TokenIssuer, TokenPair

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    """
    Trim, lower-case and syntax-check an email address.

    Raises:
        ValidationError: If the address is malformed
    """
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("email is required")
    candidate = email.strip().lower()
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"invalid email: {e}") from e
    return candidate


def _require_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required")
    return name.strip()


def _require_password(password: str) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def _require_code(code: str, length: int) -> str:
    if not is_well_formed(code, length):
        raise ValidationError(f"otp must be {length} digits")
    return code


class IdentityService:
    """
    Composes the OTP engine, secret hasher, token issuer and credential
    store into the user-facing account operations.

    Holds no durable state of its own.
    """

    def __init__(
        self,
        store: CredentialStore,
        otp_engine: OTPEngine,
        hasher: SecretHasher,
        tokens: TokenIssuer,
        email_sender: EmailSender,
    ):
        self.store = store
        self.otp_engine = otp_engine
        self.hasher = hasher
        self.tokens = tokens
        self.email_sender = email_sender

    @property
    def _otp_length(self) -> int:
        return self.otp_engine.config.length

    async def _deliver_otp(self, email: str, code: str, purpose: OTPPurpose) -> None:
        ttl_minutes = int(self.otp_engine.config.ttl.total_seconds() // 60)
        subject, body = render_otp_email(code, purpose, ttl_minutes)
        await self.email_sender.send(email, subject, body)

    async def sign_up(self, name: str, email: str, password: str) -> None:
        """
        Start signup: send a verification OTP to the email.

        Raises:
            ValidationError: Malformed input
            DuplicateUser: Email already belongs to an account
            UpstreamDependencyFailure: Email could not be sent
        """
        _require_name(name)
        _require_password(password)
        email = normalize_email(email)

        if await self.store.find_user_by_email(email) is not None:
            logger.info("Signup rejected, email registered", email=mask_email(email))
            raise DuplicateUser()

        code = await self.otp_engine.issue(email, OTPPurpose.SIGNUP)
        await self._deliver_otp(email, code, OTPPurpose.SIGNUP)
        logger.info("Signup started", email=mask_email(email))

    async def verify_signup(self, email: str, code: str, name: str, password: str) -> User:
        """
        Complete signup by consuming the signup OTP and creating the user.

        Raises:
            ValidationError: Malformed input
            DuplicateUser: Email already belongs to an account
            InvalidOTP: No live signup OTP matched
        """
        name = _require_name(name)
        _require_password(password)
        _require_code(code, self._otp_length)
        email = normalize_email(email)

        # a replayed code fails here, before any account lookup
        await self.otp_engine.consume(email, code, OTPPurpose.SIGNUP)

        password_hash = await self.hasher.hash(password)
        user = User(name=name, email=email, password_hash=password_hash, verified=True)
        # the store's unique email constraint settles racing verifications
        await self.store.insert_user(user)

        logger.info("User registered", user_id=user.id, email=mask_email(email))
        return user

    async def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate and mint an access/refresh token pair.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            NotVerified: Correct password but the account is unverified
        """
        if not isinstance(password, str) or not password:
            raise InvalidCredentials("empty password")
        try:
            email = normalize_email(email)
        except ValidationError:
            raise InvalidCredentials("malformed email") from None

        user = await self.store.find_user_by_email(email)
        if user is None:
            # same cost as a real verification
            await self.hasher.burn(password)
            logger.info("Login failed", email=mask_email(email))
            raise InvalidCredentials("unknown email")

        if not await self.hasher.verify(user.password_hash, password):
            logger.info("Login failed", user_id=user.id)
            raise InvalidCredentials("wrong password")

        if not user.verified:
            logger.info("Login blocked, unverified", user_id=user.id)
            raise NotVerified()

        pair = self.tokens.issue_pair(user.id)
        logger.info("Login succeeded", user_id=user.id)
        return pair

    async def forgot_password(self, email: str) -> None:
        """
        Send a password reset OTP.

        Raises:
            ValidationError: Malformed email
            UserNotFound: No account for this email
            UpstreamDependencyFailure: Email could not be sent
        """
        email = normalize_email(email)

        if await self.store.find_user_by_email(email) is None:
            raise UserNotFound()

        code = await self.otp_engine.issue(email, OTPPurpose.PASSWORD_RESET)
        await self._deliver_otp(email, code, OTPPurpose.PASSWORD_RESET)
        logger.info("Password reset requested", email=mask_email(email))

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        """
        Replace the password after consuming a reset OTP.

        Raises:
            ValidationError: Malformed input
            InvalidOTP: No live password reset OTP matched
            UserNotFound: No account for this email
        """
        _require_password(new_password)
        _require_code(code, self._otp_length)
        email = normalize_email(email)

        # the code is spent before the account lookup; a reset for a missing
        # account burns it and then fails with UserNotFound
        await self.otp_engine.consume(email, code, OTPPurpose.PASSWORD_RESET)

        user = await self.store.find_user_by_email(email)
        if user is None:
            raise UserNotFound()

        password_hash = await self.hasher.hash(new_password)
        if not await self.store.update_password_hash(user.id, password_hash):
            raise UserNotFound()

        logger.info("Password reset", user_id=user.id)

    async def get_profile(self, user_id: str) -> Dict[str, Any]:
        """
        Public profile of an authenticated user.

        Raises:
            NotFound: No user with this id
        """
        user = await self.store.find_user_by_id(user_id)
        if user is None:
            raise NotFound("user not found")
        return user.to_public()

    async def purge_expired_otps(self) -> int:
        """Delete OTPs past their expiry. Returns the number removed."""
        return await self.store.delete_expired_otps(self.otp_engine.clock())
