"""Test configuration for database unit tests.

This module provides an in-memory SQLite engine and session for testing the
database layer, plus a couple of owners to hang rows on.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel.pool import StaticPool

from adhd_todo.core.database import create_all, create_engine, create_sessionmaker
from adhd_todo.core.database.entities import User


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with every table."""
    engine = create_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
async def alice(in_memory_session: AsyncSession) -> User:
    user = User(name="Alice", email="alice@example.com")
    in_memory_session.add(user)
    await in_memory_session.flush()
    return user


@pytest.fixture(scope="function")
async def bob(in_memory_session: AsyncSession) -> User:
    user = User(name="Bob", email="bob@example.com")
    in_memory_session.add(user)
    await in_memory_session.flush()
    return user
