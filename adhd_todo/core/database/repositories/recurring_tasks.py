"""
Recurring task schedule repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.recurring_tasks import RecurringTask
from .base import UserOwnedRepository


class RecurringTaskRepository(UserOwnedRepository[RecurringTask]):
    """Repository for recurring schedules."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RecurringTask)

    async def list_for_user(self, user_id: str) -> List[RecurringTask]:
        """A user's schedules, soonest due first."""
        stmt = select(RecurringTask).where(RecurringTask.user_id == user_id).order_by(RecurringTask.next_due_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_due(self, user_id: str, now: datetime) -> List[RecurringTask]:
        """Schedules whose next occurrence is at or before ``now``."""
        stmt = (
            select(RecurringTask)
            .where(RecurringTask.user_id == user_id, RecurringTask.next_due_date <= now)
            .order_by(RecurringTask.next_due_date)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_template(self, template_id: str, user_id: str) -> Optional[RecurringTask]:
        stmt = select(RecurringTask).where(RecurringTask.template_id == template_id, RecurringTask.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
