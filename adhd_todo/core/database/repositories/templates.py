"""
Task template repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.templates import TaskTemplate
from .base import UserOwnedRepository


class TaskTemplateRepository(UserOwnedRepository[TaskTemplate]):
    """Repository for task templates."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TaskTemplate)

    async def list_for_user(self, user_id: str) -> List[TaskTemplate]:
        """A user's templates ordered by name."""
        stmt = select(TaskTemplate).where(TaskTemplate.user_id == user_id).order_by(TaskTemplate.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(TaskTemplate).where(TaskTemplate.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def find_by_name(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> Optional[TaskTemplate]:
        stmt = select(TaskTemplate).where(TaskTemplate.user_id == user_id, TaskTemplate.name == name)
        if exclude_id is not None:
            stmt = stmt.where(TaskTemplate.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()
