"""
Application Factory
===================
Wires configuration, persistence, hashing, tokens and email into a FastAPI
application.

Usage:
    uvicorn identity_core.app:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import structlog

from identity_core import __version__
from identity_core.api import create_auth_router, register_error_handlers
from identity_core.config import IdentityConfig
from identity_core.logging import RequestLoggingMiddleware, setup_logging
from identity_core.mail import EmailSender, SMTPEmailSender
from identity_core.otp import OTPConfig, OTPEngine
from identity_core.password import SecretHasher
from identity_core.service import IdentityService
from identity_core.store import (
    CredentialStore,
    SQLCredentialStore,
    create_async_engine,
    create_schema,
)
from identity_core.tokens import TokenIssuer

logger = structlog.get_logger(__name__)


def create_app(
    config: Optional[IdentityConfig] = None,
    store: Optional[CredentialStore] = None,
    email_sender: Optional[EmailSender] = None,
    hasher: Optional[SecretHasher] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the identity service application.

    Args:
        config: Settings (default: read from environment)
        store: Credential store (default: SQL store on config.database_url)
        email_sender: Email transport (default: SMTP from config.email)
        hasher: Secret hasher (default: Argon2id with config.hashing)
        configure_logging: Install structlog configuration
    """
    config = config or IdentityConfig.from_env()
    if configure_logging:
        setup_logging(config.service_name, config.log_level, config.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        credential_store = store
        if credential_store is None:
            engine = create_async_engine(config.database_url)
            await create_schema(engine)
            credential_store = SQLCredentialStore(engine)

        secret_hasher = hasher or SecretHasher(config.hashing)
        token_issuer = TokenIssuer(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            access_ttl=config.access_token_ttl,
            refresh_ttl=config.refresh_token_ttl,
        )
        otp_engine = OTPEngine(credential_store, OTPConfig(ttl=config.otp_ttl))

        app.state.token_issuer = token_issuer
        app.state.identity_service = IdentityService(
            store=credential_store,
            otp_engine=otp_engine,
            hasher=secret_hasher,
            tokens=token_issuer,
            email_sender=email_sender or SMTPEmailSender(config.email),
        )
        logger.info("Identity service started", service=config.service_name)

        try:
            yield
        finally:
            # injected collaborators are owned by the caller
            if store is None:
                await credential_store.close()
            if hasher is None:
                secret_hasher.close()
            logger.info("Identity service stopped")

    app = FastAPI(
        title="Identity Core",
        version=__version__,
        description="OTP-verified signup, login and password recovery with JWT bearer tokens.",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(app)
    app.include_router(create_auth_router())
    return app
