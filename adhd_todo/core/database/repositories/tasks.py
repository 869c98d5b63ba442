"""
Task repository.

Besides plain CRUD this repository answers the aggregate questions the API
needs: subtasks grouped by parent, per-goal task lists, per-schedule counts
and the dashboard statistics.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.categories import TaskCategoryLink
from ..entities.tasks import Task
from .base import QueryBuilder, UserOwnedRepository


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class TaskRepository(UserOwnedRepository[Task]):
    """Repository for tasks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def list_for_user(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        category_id: Optional[str] = None,
        goal_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """List a user's tasks, newest first.

        Args:
            user_id: Owner
            completed: Only completed (True) or open (False) tasks
            category_id: Only tasks carrying this category
            goal_id: Only tasks connected to this goal
            search: Case-insensitive substring of title or description

        Returns:
            Matching tasks with categories loaded
        """
        stmt = select(Task).where(Task.user_id == user_id)
        if completed is True:
            stmt = stmt.where(Task.completed_at.is_not(None))
        elif completed is False:
            stmt = stmt.where(Task.completed_at.is_(None))
        if category_id:
            stmt = stmt.join(TaskCategoryLink, TaskCategoryLink.task_id == Task.id).where(
                TaskCategoryLink.category_id == category_id
            )
        stmt = QueryBuilder.apply_filters(stmt, Task, {"goal_id": goal_id})
        stmt = QueryBuilder.apply_search(stmt, [Task.title, Task.description], search)
        stmt = stmt.order_by(Task.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def subtasks_by_parent(self, parent_ids: List[str]) -> Dict[str, List[Task]]:
        """Subtasks of the given tasks, grouped by parent id, oldest first."""
        grouped: Dict[str, List[Task]] = defaultdict(list)
        if not parent_ids:
            return grouped
        stmt = select(Task).where(Task.parent_id.in_(parent_ids)).order_by(Task.created_at)
        result = await self.session.execute(stmt)
        for task in result.scalars().all():
            grouped[task.parent_id].append(task)
        return grouped

    async def list_for_goals(self, goal_ids: List[str]) -> Dict[str, List[Task]]:
        """Tasks connected to each goal."""
        grouped: Dict[str, List[Task]] = defaultdict(list)
        if not goal_ids:
            return grouped
        stmt = select(Task).where(Task.goal_id.in_(goal_ids)).order_by(Task.created_at)
        result = await self.session.execute(stmt)
        for task in result.scalars().all():
            grouped[task.goal_id].append(task)
        return grouped

    async def assign_goal(self, task_ids: List[str], goal_id: str) -> None:
        if task_ids:
            await self.session.execute(update(Task).where(Task.id.in_(task_ids)).values(goal_id=goal_id))

    async def clear_goal(self, goal_id: str) -> None:
        """Disconnect every task from a goal."""
        await self.session.execute(update(Task).where(Task.goal_id == goal_id).values(goal_id=None))

    async def list_for_schedule(self, recurring_task_id: str, limit: int = 5) -> List[Task]:
        """Most recently generated tasks of a recurring schedule."""
        stmt = (
            select(Task)
            .where(Task.recurring_task_id == recurring_task_id)
            .order_by(Task.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_schedule(self, recurring_task_id: str) -> int:
        stmt = select(func.count()).select_from(Task).where(Task.recurring_task_id == recurring_task_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def stats_for_user(self, user_id: str, now: datetime, day_start: datetime, day_end: datetime) -> Dict[str, int]:
        """Dashboard counters.

        Args:
            user_id: Owner
            now: Current naive UTC time; open tasks due before it are overdue
            day_start: Start of today (inclusive)
            day_end: Start of tomorrow (exclusive)

        Returns:
            Dict with total, completed, overdue and due_today counts
        """
        open_task = Task.completed_at.is_(None)
        stmt = select(
            func.count(Task.id),
            func.count(Task.completed_at),
            _count_where(and_(open_task, Task.due_date < now)),
            _count_where(and_(open_task, Task.due_date >= day_start, Task.due_date < day_end)),
        ).where(Task.user_id == user_id)
        result = await self.session.execute(stmt)
        total, completed, overdue, due_today = result.one()
        return {"total": total, "completed": completed, "overdue": overdue, "due_today": due_today}
