"""Unit tests for the task repository against in-memory SQLite."""

from __future__ import annotations

from datetime import datetime, timedelta

from adhd_todo.core.database.entities import Category, Goal, Project, Task
from adhd_todo.core.database.repositories import TaskRepository
from adhd_todo.core.database.repositories.base import QueryBuilder

NOW = datetime(2024, 6, 10, 12, 0)


async def _task(session, user, title: str, **fields) -> Task:
    task = Task(title=title, user_id=user.id, **fields)
    session.add(task)
    await session.flush()
    return task


class TestTaskRepositoryListing:
    """Tests for TaskRepository.list_for_user filters."""

    async def test_newest_first_and_scoped_to_user(self, in_memory_session, alice, bob):
        await _task(in_memory_session, alice, "Old", created_at=NOW - timedelta(days=1))
        await _task(in_memory_session, alice, "New", created_at=NOW)
        await _task(in_memory_session, bob, "Bob's")

        tasks = await TaskRepository(in_memory_session).list_for_user(alice.id)
        assert [t.title for t in tasks] == ["New", "Old"]

    async def test_completed_filter(self, in_memory_session, alice):
        await _task(in_memory_session, alice, "Open")
        await _task(in_memory_session, alice, "Done", completed_at=NOW)
        repo = TaskRepository(in_memory_session)

        assert [t.title for t in await repo.list_for_user(alice.id, completed=True)] == ["Done"]
        assert [t.title for t in await repo.list_for_user(alice.id, completed=False)] == ["Open"]

    async def test_category_filter(self, in_memory_session, alice):
        work = Category(name="Work", user_id=alice.id)
        in_memory_session.add(work)
        await _task(in_memory_session, alice, "Report", categories=[work])
        await _task(in_memory_session, alice, "Groceries")

        tasks = await TaskRepository(in_memory_session).list_for_user(alice.id, category_id=work.id)
        assert [t.title for t in tasks] == ["Report"]

    async def test_search_is_case_insensitive(self, in_memory_session, alice):
        await _task(in_memory_session, alice, "Call Mom", description=None)
        await _task(in_memory_session, alice, "Groceries", description="Milk and BREAD")

        repo = TaskRepository(in_memory_session)
        assert [t.title for t in await repo.list_for_user(alice.id, search="bread")] == ["Groceries"]
        assert [t.title for t in await repo.list_for_user(alice.id, search="CALL")] == ["Call Mom"]


class TestTaskRepositoryGoals:
    """Tests for goal assignment helpers."""

    async def test_assign_and_clear(self, in_memory_session, alice):
        project = Project(name="Home", user_id=alice.id)
        in_memory_session.add(project)
        await in_memory_session.flush()
        goal = Goal(name="Paint", project_id=project.id)
        in_memory_session.add(goal)
        first = await _task(in_memory_session, alice, "Buy paint")
        second = await _task(in_memory_session, alice, "Tape edges")
        repo = TaskRepository(in_memory_session)

        await repo.assign_goal([first.id, second.id], goal.id)
        grouped = await repo.list_for_goals([goal.id])
        assert {t.title for t in grouped[goal.id]} == {"Buy paint", "Tape edges"}

        await repo.clear_goal(goal.id)
        assert (await repo.list_for_goals([goal.id]))[goal.id] == []


class TestTaskRepositoryStats:
    """Tests for dashboard counters."""

    async def test_stats_for_user(self, in_memory_session, alice):
        day_start = NOW.replace(hour=0)
        await _task(in_memory_session, alice, "Done", completed_at=NOW, due_date=NOW - timedelta(days=3))
        await _task(in_memory_session, alice, "Late", due_date=NOW - timedelta(days=1))
        await _task(in_memory_session, alice, "Tonight", due_date=NOW + timedelta(hours=6))
        await _task(in_memory_session, alice, "Someday")

        stats = await TaskRepository(in_memory_session).stats_for_user(
            alice.id, NOW, day_start, day_start + timedelta(days=1)
        )
        assert stats == {"total": 4, "completed": 1, "overdue": 1, "due_today": 1}

    async def test_stats_for_new_user(self, in_memory_session, alice):
        stats = await TaskRepository(in_memory_session).stats_for_user(alice.id, NOW, NOW, NOW)
        assert stats == {"total": 0, "completed": 0, "overdue": 0, "due_today": 0}


class TestQueryBuilder:
    """Tests for QueryBuilder helpers."""

    def test_filters_skip_none_and_unknown_columns(self):
        from sqlmodel import select

        stmt = QueryBuilder.apply_filters(select(Task), Task, {"goal_id": None, "nonexistent": "x"})
        assert stmt.whereclause is None

    def test_pagination(self):
        from sqlmodel import select

        stmt = QueryBuilder.apply_pagination(select(Task), 10, 20)
        assert stmt._limit == 10
        assert stmt._offset == 20
