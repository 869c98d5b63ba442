"""Unit tests for engine and session factory helpers."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from adhd_todo.core.database import create_engine, create_sessionmaker
from adhd_todo.core.database.base import new_id, to_naive_utc, utc_now
from adhd_todo.core.database.entities import Task


class TestCreateEngine:
    """Tests for URL normalization."""

    @pytest.mark.parametrize(
        "url",
        [
            "postgres://u:p@db/todo",
            "postgresql://u:p@db/todo",
            "postgresql+psycopg2://u:p@db/todo",
        ],
    )
    async def test_postgres_urls_use_asyncpg(self, url):
        engine = create_engine(url)
        try:
            assert engine.url.drivername == "postgresql+asyncpg"
            assert engine.url.database == "todo"
        finally:
            await engine.dispose()

    async def test_sqlite_enables_foreign_keys(self, in_memory_engine):
        async with in_memory_engine.connect() as conn:
            result = await conn.execute(text("PRAGMA foreign_keys"))
            assert result.scalar_one() == 1

    async def test_foreign_keys_are_enforced(self, in_memory_session):
        in_memory_session.add(Task(title="Orphan", user_id="no-such-user"))

        with pytest.raises(IntegrityError):
            await in_memory_session.flush()


class TestSessionmaker:
    """Tests for the session factory defaults."""

    async def test_objects_survive_commit(self, in_memory_engine):
        assert create_sessionmaker(in_memory_engine).kw["expire_on_commit"] is False


class TestBaseHelpers:
    """Tests for id and timestamp helpers."""

    def test_new_id_is_hex(self):
        value = new_id()
        assert len(value) == 32
        int(value, 16)

    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None

    def test_to_naive_utc_converts_offsets(self):
        from datetime import datetime, timedelta, timezone

        aware = datetime(2024, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2024, 3, 1, 8, 0)
        assert to_naive_utc(datetime(2024, 3, 1, 10, 0)) == datetime(2024, 3, 1, 10, 0)
        assert to_naive_utc(None) is None
