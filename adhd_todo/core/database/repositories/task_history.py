"""
Task history repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.task_history import TaskHistory
from .base import AsyncBaseRepository


class TaskHistoryRepository(AsyncBaseRepository[TaskHistory]):
    """Repository for the append-only task audit trail."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TaskHistory)

    async def list_for_task(self, task_id: str, user_id: str, limit: Optional[int] = None) -> List[TaskHistory]:
        """History of one task, newest first."""
        stmt = (
            select(TaskHistory)
            .where(TaskHistory.task_id == task_id, TaskHistory.user_id == user_id)
            .order_by(TaskHistory.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user_since(self, user_id: str, since: datetime) -> List[TaskHistory]:
        """Every change a user made since ``since``, newest first."""
        stmt = (
            select(TaskHistory)
            .where(TaskHistory.user_id == user_id, TaskHistory.created_at >= since)
            .order_by(TaskHistory.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
