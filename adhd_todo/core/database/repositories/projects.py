"""
Project and goal repositories.

Goals have no owner column; every goal query joins through ``projects`` to
scope by user.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.projects import Goal, Project
from ..entities.tasks import Task
from .base import AsyncBaseRepository, QueryBuilder, UserOwnedRepository


class ProjectRepository(UserOwnedRepository[Project]):
    """Repository for projects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def list_for_user(self, user_id: str, search: Optional[str] = None) -> List[Project]:
        stmt = select(Project).where(Project.user_id == user_id)
        stmt = QueryBuilder.apply_search(stmt, [Project.name, Project.description], search)
        result = await self.session.execute(stmt.order_by(Project.created_at.desc()))
        return list(result.scalars().all())


class GoalRepository(AsyncBaseRepository[Goal]):
    """Repository for goals, scoped through their project."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Goal)

    async def get_for_user(self, goal_id: str, user_id: str) -> Optional[Tuple[Goal, Project]]:
        """Get a goal together with its project when the project belongs to ``user_id``."""
        stmt = (
            select(Goal, Project)
            .join(Project, Goal.project_id == Project.id)
            .where(Goal.id == goal_id, Project.user_id == user_id)
        )
        row = (await self.session.execute(stmt)).first()
        return (row[0], row[1]) if row else None

    async def list_for_user(
        self,
        user_id: str,
        project_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Tuple[Goal, Project]]:
        """Goals of a user's projects, newest first, each paired with its project."""
        stmt = select(Goal, Project).join(Project, Goal.project_id == Project.id).where(Project.user_id == user_id)
        if project_id:
            stmt = stmt.where(Goal.project_id == project_id)
        stmt = QueryBuilder.apply_search(stmt, [Goal.name, Goal.description], search)
        result = await self.session.execute(stmt.order_by(Goal.created_at.desc()))
        return [(goal, project) for goal, project in result.all()]

    async def list_for_projects(self, project_ids: List[str]) -> Dict[str, List[Goal]]:
        grouped: Dict[str, List[Goal]] = {project_id: [] for project_id in project_ids}
        if not project_ids:
            return grouped
        stmt = select(Goal).where(Goal.project_id.in_(project_ids)).order_by(Goal.created_at)
        for goal in (await self.session.execute(stmt)).scalars().all():
            grouped[goal.project_id].append(goal)
        return grouped

    async def task_counts(self, goal_ids: List[str]) -> Dict[str, int]:
        """Number of tasks connected to each goal."""
        counts = {goal_id: 0 for goal_id in goal_ids}
        if not goal_ids:
            return counts
        stmt = select(Task.goal_id, func.count(Task.id)).where(Task.goal_id.in_(goal_ids)).group_by(Task.goal_id)
        counts.update({goal_id: count for goal_id, count in (await self.session.execute(stmt)).all()})
        return counts
