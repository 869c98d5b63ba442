"""
User settings repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.user_settings import UserSettings
from .base import AsyncBaseRepository


class UserSettingsRepository(AsyncBaseRepository[UserSettings]):
    """Repository for the one-per-user settings row."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserSettings)

    async def get_for_user(self, user_id: str) -> Optional[UserSettings]:
        stmt = select(UserSettings).where(UserSettings.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: str) -> UserSettings:
        """Get the settings row, creating it with defaults on first use."""
        existing = await self.get_for_user(user_id)
        if existing is not None:
            return existing
        return await self.create(UserSettings(user_id=user_id))
