"""
SQL Credential Store
====================
SQLAlchemy-backed users and OTPs.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import Boolean, DateTime, String, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from identity_core.errors import DuplicateUser
from identity_core.models import User
from identity_core.otp.models import OTPPurpose, OTPRecord
from .base import CredentialStore
from .database import Base, close_engine, create_session_factory

logger = structlog.get_logger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_user(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            password_hash=self.password_hash,
            verified=self.verified,
            created_at=_aware(self.created_at),
        )


class OTPRow(Base):
    __tablename__ = "otps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), index=True)
    code: Mapped[str] = mapped_column(String(12))
    purpose: Mapped[str] = mapped_column(String(32))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    used: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class SQLCredentialStore(CredentialStore):
    """
    Credential store on a relational database.

    OTP consumption is one conditional UPDATE; the database serialises
    concurrent updates of the same row, so only one caller sees a match.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.engine = engine
        self._sessions = session_factory or create_session_factory(engine)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        async with self._sessions() as session:
            row = await session.scalar(select(UserRow).where(UserRow.email == email))
            return row.to_user() if row else None

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        async with self._sessions() as session:
            row = await session.get(UserRow, user_id)
            return row.to_user() if row else None

    async def insert_user(self, user: User) -> None:
        async with self._sessions() as session:
            session.add(UserRow(
                id=user.id,
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                verified=user.verified,
                created_at=user.created_at,
            ))
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateUser("email already registered") from e

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        async with self._sessions() as session:
            result = await session.execute(
                update(UserRow)
                .where(UserRow.id == user_id)
                .values(password_hash=password_hash)
            )
            await session.commit()
            return result.rowcount > 0

    async def insert_otp(self, otp: OTPRecord) -> None:
        async with self._sessions() as session:
            session.add(OTPRow(
                id=otp.id,
                email=otp.email,
                code=otp.code,
                purpose=otp.purpose.value,
                expires_at=otp.expires_at,
                used=otp.used,
                created_at=otp.created_at,
            ))
            await session.commit()

    async def consume_otp_atomic(
        self,
        email: str,
        code: str,
        purpose: OTPPurpose,
        now: datetime,
    ) -> bool:
        async with self._sessions() as session:
            result = await session.execute(
                update(OTPRow)
                .where(
                    OTPRow.email == email,
                    OTPRow.code == code,
                    OTPRow.purpose == purpose.value,
                    OTPRow.used.is_(False),
                    OTPRow.expires_at > now,
                )
                .values(used=True)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount > 0

    async def delete_expired_otps(self, now: datetime) -> int:
        async with self._sessions() as session:
            result = await session.execute(
                delete(OTPRow)
                .where(OTPRow.expires_at < now)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        if result.rowcount:
            logger.info("Expired OTPs purged", count=result.rowcount)
        return result.rowcount

    async def close(self) -> None:
        await close_engine(self.engine)
