"""
User, login session and reset-token repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User, UserSession, VerificationToken
from .base import AsyncBaseRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by e-mail, compared lower-cased.

        Args:
            email: E-mail address as typed by the user

        Returns:
            User instance or None
        """
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class UserSessionRepository(AsyncBaseRepository[UserSession]):
    """Repository for login sessions keyed by token hash."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserSession)

    async def get_active(self, token_hash: str, now: datetime) -> Optional[UserSession]:
        """Get the unexpired session for a token hash.

        Args:
            token_hash: SHA-256 hex digest of the bearer token
            now: Current naive UTC time

        Returns:
            UserSession instance or None when unknown or expired
        """
        stmt = select(UserSession).where(UserSession.token_hash == token_hash, UserSession.expires_at > now)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_token_hash(self, token_hash: str) -> None:
        await self.session.execute(delete(UserSession).where(UserSession.token_hash == token_hash))

    async def delete_for_user(self, user_id: str) -> None:
        """Revoke every session of a user."""
        await self.session.execute(delete(UserSession).where(UserSession.user_id == user_id))

    async def purge_expired(self, now: datetime) -> int:
        result = await self.session.execute(delete(UserSession).where(UserSession.expires_at <= now))
        return result.rowcount or 0


class VerificationTokenRepository(AsyncBaseRepository[VerificationToken]):
    """Repository for password reset tokens."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VerificationToken)

    async def get_valid(self, token_hash: str, now: datetime) -> Optional[VerificationToken]:
        stmt = select(VerificationToken).where(
            VerificationToken.token_hash == token_hash,
            VerificationToken.expires_at > now,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_for_identifier(self, identifier: str) -> None:
        """Drop every outstanding token issued for an e-mail."""
        await self.session.execute(delete(VerificationToken).where(VerificationToken.identifier == identifier))
