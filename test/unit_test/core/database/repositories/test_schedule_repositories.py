"""Unit tests for category, template, recurring task and focus session repositories."""

from __future__ import annotations

from datetime import datetime, timedelta

from adhd_todo.core.database.entities import Category, FocusSession, RecurringTask, Task, TaskTemplate
from adhd_todo.core.database.repositories import (
    CategoryRepository,
    FocusSessionRepository,
    RecurringTaskRepository,
    TaskRepository,
    TaskTemplateRepository,
)

NOW = datetime(2024, 6, 10, 12, 0)


class TestCategoryRepository:
    """Tests for CategoryRepository operations."""

    async def test_find_by_name_ignores_case(self, in_memory_session, alice, bob):
        work = await CategoryRepository(in_memory_session).create(Category(name="Work", user_id=alice.id))
        repo = CategoryRepository(in_memory_session)

        assert (await repo.find_by_name(alice.id, "WORK")).id == work.id
        assert await repo.find_by_name(alice.id, "work", exclude_id=work.id) is None
        assert await repo.find_by_name(bob.id, "work") is None

    async def test_task_counts_and_detach(self, in_memory_session, alice):
        repo = CategoryRepository(in_memory_session)
        work = await repo.create(Category(name="Work", user_id=alice.id))
        home = await repo.create(Category(name="Home", user_id=alice.id))
        in_memory_session.add(Task(title="Report", user_id=alice.id, categories=[work]))
        in_memory_session.add(Task(title="Slides", user_id=alice.id, categories=[work]))
        await in_memory_session.flush()

        assert await repo.task_counts([work.id, home.id]) == {work.id: 2, home.id: 0}

        await repo.detach(work.id)
        assert await repo.task_counts([work.id]) == {work.id: 0}

    async def test_list_is_ordered_by_name(self, in_memory_session, alice):
        repo = CategoryRepository(in_memory_session)
        for name in ("Work", "Health", "Personal"):
            await repo.create(Category(name=name, user_id=alice.id))

        assert [c.name for c in await repo.list_for_user(alice.id)] == ["Health", "Personal", "Work"]


class TestTaskTemplateRepository:
    """Tests for TaskTemplateRepository operations."""

    async def test_count_and_find(self, in_memory_session, alice):
        repo = TaskTemplateRepository(in_memory_session)
        assert await repo.count_for_user(alice.id) == 0

        template = await repo.create(TaskTemplate(name="Pay Bills", user_id=alice.id))
        assert await repo.count_for_user(alice.id) == 1
        assert (await repo.find_by_name(alice.id, "Pay Bills")).id == template.id
        assert await repo.find_by_name(alice.id, "Pay Bills", exclude_id=template.id) is None


class TestRecurringTaskRepository:
    """Tests for due schedule lookups."""

    async def _schedule(self, session, user, name: str, next_due_date: datetime) -> RecurringTask:
        template = await TaskTemplateRepository(session).create(TaskTemplate(name=name, user_id=user.id))
        return await RecurringTaskRepository(session).create(
            RecurringTask(template_id=template.id, user_id=user.id, next_due_date=next_due_date, start_date=NOW)
        )

    async def test_list_due_includes_now(self, in_memory_session, alice):
        past = await self._schedule(in_memory_session, alice, "Past", NOW - timedelta(days=1))
        current = await self._schedule(in_memory_session, alice, "Now", NOW)
        await self._schedule(in_memory_session, alice, "Future", NOW + timedelta(minutes=1))

        due = await RecurringTaskRepository(in_memory_session).list_due(alice.id, NOW)
        assert [s.id for s in due] == [past.id, current.id]

    async def test_list_for_user_soonest_first(self, in_memory_session, alice):
        later = await self._schedule(in_memory_session, alice, "Later", NOW + timedelta(days=2))
        sooner = await self._schedule(in_memory_session, alice, "Sooner", NOW + timedelta(days=1))

        schedules = await RecurringTaskRepository(in_memory_session).list_for_user(alice.id)
        assert [s.id for s in schedules] == [sooner.id, later.id]

    async def test_generated_task_counters(self, in_memory_session, alice):
        schedule = await self._schedule(in_memory_session, alice, "Daily", NOW)
        for day in range(3):
            in_memory_session.add(
                Task(title="Daily", user_id=alice.id, recurring_task_id=schedule.id, created_at=NOW + timedelta(days=day))
            )
        await in_memory_session.flush()

        repo = TaskRepository(in_memory_session)
        assert await repo.count_for_schedule(schedule.id) == 3
        recent = await repo.list_for_schedule(schedule.id, limit=2)
        assert [t.created_at for t in recent] == [NOW + timedelta(days=2), NOW + timedelta(days=1)]


class TestFocusSessionRepository:
    """Tests for focus session paging and stats."""

    async def test_search_totals_and_daily_stats(self, in_memory_session, alice):
        repo = FocusSessionRepository(in_memory_session)
        for start, minutes, kind in [
            (NOW - timedelta(days=1), 25, "pomodoro"),
            (NOW - timedelta(hours=2), 50, "deep-work"),
            (NOW - timedelta(hours=1), 25, "pomodoro"),
        ]:
            await repo.create(FocusSession(start_time=start, duration=minutes, type=kind, user_id=alice.id))

        page, total, total_duration = await repo.search(alice.id, limit=2)
        assert len(page) == 2
        assert page[0].start_time == NOW - timedelta(hours=1)
        assert (total, total_duration) == (3, 100)

        _, total, total_duration = await repo.search(alice.id, session_type="pomodoro")
        assert (total, total_duration) == (2, 50)

        daily = await repo.daily_stats(alice.id, NOW - timedelta(days=7))
        assert daily == [("2024-06-10", 75, 2), ("2024-06-09", 25, 1)]
