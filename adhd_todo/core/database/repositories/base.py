"""
Base repository interfaces and utilities.

This module provides the foundational repository pattern used across all
repository implementations. Repositories add and flush; committing is left to
the caller so one request can write several rows (a task and its history
entry, say) in a single transaction.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Base async repository with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Add a new entity and flush it.

        Args:
            entity: SQLModel instance to persist

        Returns:
            The same instance, now persistent
        """
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_id(self, entity_id: str, refresh: bool = False) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value
            refresh: Reload attributes and eager relationships even if the
                instance is already in the identity map

        Returns:
            Entity instance or None if not found
        """
        stmt = select(self.model).where(self.model.id == entity_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        """Flush changes made to an entity and bump its ``updated_at``.

        Args:
            entity: SQLModel instance with updated fields

        Returns:
            Updated entity instance
        """
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, entity: EntityType) -> None:
        """Delete an entity.

        Args:
            entity: Persistent instance to remove
        """
        await self.session.delete(entity)
        await self.session.flush()

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and equality filters.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class UserOwnedRepository(AsyncBaseRepository[EntityType]):
    """Repository for entities carrying a ``user_id`` column."""

    async def get_for_user(self, entity_id: str, user_id: str, refresh: bool = False) -> Optional[EntityType]:
        """Get an entity only if it belongs to ``user_id``.

        Args:
            entity_id: Primary key value
            user_id: Owner to match
            refresh: Reload even if already in the identity map

        Returns:
            Entity instance, or None when missing or owned by someone else
        """
        stmt = select(self.model).where(self.model.id == entity_id, self.model.user_id == user_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many_for_user(self, entity_ids: List[str], user_id: str) -> List[EntityType]:
        """Get every listed entity owned by ``user_id``; unknown ids are skipped."""
        if not entity_ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(entity_ids), self.model.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a select statement.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters; ``None`` values are ignored

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def apply_search(stmt, columns, term: Optional[str]):
        """Restrict to rows where any of ``columns`` contains ``term`` (case-insensitive)."""
        if not term:
            return stmt
        pattern = f"%{term.lower()}%"
        return stmt.where(or_(*[func.lower(column).like(pattern) for column in columns]))
