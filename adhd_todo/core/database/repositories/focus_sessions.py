"""
Focus session repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.focus_sessions import FocusSession
from .base import QueryBuilder, UserOwnedRepository


class FocusSessionRepository(UserOwnedRepository[FocusSession]):
    """Repository for focus sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FocusSession)

    def _filtered(
        self,
        stmt,
        user_id: str,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        session_type: Optional[str],
        task_id: Optional[str],
    ):
        stmt = stmt.where(FocusSession.user_id == user_id)
        if start_date is not None:
            stmt = stmt.where(FocusSession.start_time >= start_date)
        if end_date is not None:
            stmt = stmt.where(FocusSession.start_time <= end_date)
        return QueryBuilder.apply_filters(stmt, FocusSession, {"type": session_type, "task_id": task_id})

    async def search(
        self,
        user_id: str,
        limit: int = 10,
        offset: int = 0,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        session_type: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> Tuple[List[FocusSession], int, int]:
        """Page through a user's sessions, newest first.

        Returns:
            Tuple of (page of sessions, total matching count, total minutes across all matches)
        """
        page_stmt = self._filtered(select(FocusSession), user_id, start_date, end_date, session_type, task_id)
        page_stmt = QueryBuilder.apply_pagination(page_stmt.order_by(FocusSession.start_time.desc()), limit, offset)
        page = list((await self.session.execute(page_stmt)).scalars().all())

        totals_stmt = self._filtered(
            select(func.count(FocusSession.id), func.coalesce(func.sum(FocusSession.duration), 0)),
            user_id,
            start_date,
            end_date,
            session_type,
            task_id,
        )
        total, total_duration = (await self.session.execute(totals_stmt)).one()
        return page, total, int(total_duration)

    async def daily_stats(self, user_id: str, since: datetime) -> List[Tuple[str, int, int]]:
        """Minutes and session count per calendar day since ``since``, newest day first."""
        day = func.date(FocusSession.start_time)
        stmt = (
            select(day, func.coalesce(func.sum(FocusSession.duration), 0), func.count(FocusSession.id))
            .where(FocusSession.user_id == user_id, FocusSession.start_time >= since)
            .group_by(day)
            .order_by(day.desc())
        )
        result = await self.session.execute(stmt)
        return [(str(d), int(total), int(count)) for d, total, count in result.all()]
