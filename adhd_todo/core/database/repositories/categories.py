"""
Category repository.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.categories import Category, TaskCategoryLink, TemplateCategoryLink
from .base import UserOwnedRepository


class CategoryRepository(UserOwnedRepository[Category]):
    """Repository for user categories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def list_for_user(self, user_id: str) -> List[Category]:
        """List a user's categories ordered by name."""
        stmt = select(Category).where(Category.user_id == user_id).order_by(Category.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_name(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> Optional[Category]:
        """Find a category with the same name, ignoring case.

        Args:
            user_id: Owner
            name: Name to look for
            exclude_id: Category to ignore (the one being renamed)

        Returns:
            The clashing category or None
        """
        stmt = select(Category).where(Category.user_id == user_id, func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def task_counts(self, category_ids: List[str]) -> Dict[str, int]:
        """Number of tasks attached to each category."""
        if not category_ids:
            return {}
        stmt = (
            select(TaskCategoryLink.category_id, func.count(TaskCategoryLink.task_id))
            .where(TaskCategoryLink.category_id.in_(category_ids))
            .group_by(TaskCategoryLink.category_id)
        )
        result = await self.session.execute(stmt)
        counts = {category_id: 0 for category_id in category_ids}
        counts.update({category_id: count for category_id, count in result.all()})
        return counts

    async def detach(self, category_id: str) -> None:
        """Remove a category from every task and template."""
        await self.session.execute(delete(TaskCategoryLink).where(TaskCategoryLink.category_id == category_id))
        await self.session.execute(
            delete(TemplateCategoryLink).where(TemplateCategoryLink.category_id == category_id)
        )
