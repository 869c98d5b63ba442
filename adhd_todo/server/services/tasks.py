"""
Task service.

Owns task writes so each change and its history entry commit together.
Ownership is checked here: another user's task is reported as 403 rather
than 404.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import Category, Task
from adhd_todo.core.database.repositories import (
    CategoryRepository,
    GoalRepository,
    TaskHistoryRepository,
    TaskRepository,
)
from adhd_todo.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from adhd_todo.core.models.domain.enums import ChangeType
from adhd_todo.core.models.io.tasks import (
    TaskCreate,
    TaskDetailRead,
    TaskHistoryRead,
    TaskRead,
    TaskUpdate,
)

from . import task_history

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = {"category_ids", "categories"}
HISTORY_IN_DETAIL = 10


def to_task_read(task: Task, subtasks: Iterable[Task] = ()) -> TaskRead:
    read = TaskRead.model_validate(task)
    read.subtasks = [TaskRead.model_validate(subtask) for subtask in subtasks]
    return read


class TaskService:
    """Create, read, update and delete tasks for one user at a time."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tasks = TaskRepository(session)
        self.categories = CategoryRepository(session)
        self.goals = GoalRepository(session)
        self.history = TaskHistoryRepository(session)

    async def get_owned(self, task_id: str, user_id: str, refresh: bool = False) -> Task:
        """
        Load a task and check its owner.

        Raises:
            NotFoundError: no task with this id
            ForbiddenError: the task belongs to another user
        """
        task = await self.tasks.get_by_id(task_id, refresh=refresh)
        if task is None:
            raise NotFoundError("Task")
        if task.user_id != user_id:
            raise ForbiddenError()
        return task

    async def resolve_categories(self, user_id: str, category_ids: List[str]) -> List[Category]:
        """Categories for the given ids; every id must belong to the user."""
        categories = await self.categories.get_many_for_user(category_ids, user_id)
        found = {category.id for category in categories}
        missing = [category_id for category_id in category_ids if category_id not in found]
        if missing:
            raise ValidationFailedError(f"Invalid category ids: {', '.join(missing)}")
        by_id = {category.id: category for category in categories}
        return [by_id[category_id] for category_id in category_ids]

    async def _check_relations(self, user_id: str, fields: Dict[str, Any], task_id: Optional[str] = None) -> None:
        goal_id = fields.get("goal_id")
        if goal_id and await self.goals.get_for_user(goal_id, user_id) is None:
            raise ValidationFailedError(f"Invalid goal id: {goal_id}")
        parent_id = fields.get("parent_id")
        if parent_id:
            if parent_id == task_id:
                raise ValidationFailedError("A task cannot be its own parent")
            if await self.tasks.get_for_user(parent_id, user_id) is None:
                raise ValidationFailedError(f"Invalid parent task id: {parent_id}")

    async def list_tasks(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        category_id: Optional[str] = None,
        goal_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[TaskRead]:
        tasks = await self.tasks.list_for_user(user_id, completed, category_id, goal_id, search)
        subtasks = await self.tasks.subtasks_by_parent([task.id for task in tasks])
        return [to_task_read(task, subtasks.get(task.id, [])) for task in tasks]

    async def get_detail(self, task_id: str, user_id: str) -> TaskDetailRead:
        """Task with subtasks and its most recent history entries."""
        task = await self.get_owned(task_id, user_id)
        subtasks = await self.tasks.subtasks_by_parent([task.id])
        entries = await self.history.list_for_task(task.id, user_id, limit=HISTORY_IN_DETAIL)
        detail = TaskDetailRead.model_validate(to_task_read(task, subtasks.get(task.id, [])), from_attributes=True)
        detail.history = [TaskHistoryRead.from_entity(entry) for entry in entries]
        return detail

    async def read(self, task: Task) -> TaskRead:
        subtasks = await self.tasks.subtasks_by_parent([task.id])
        return to_task_read(task, subtasks.get(task.id, []))

    async def create(self, user_id: str, data: TaskCreate, history_extra: Optional[Dict[str, Any]] = None) -> Task:
        """
        Create a task and its CREATED history entry.

        Args:
            user_id: Owner
            data: Validated task fields
            history_extra: Extra keys for the history payload (e.g. the template it came from)
        """
        fields = data.model_dump(exclude=CATEGORY_FIELDS)
        await self._check_relations(user_id, fields)
        categories = await self.resolve_categories(user_id, data.resolved_category_ids() or [])

        task = await self.tasks.create(Task(user_id=user_id, categories=categories, **fields))
        change_data = {
            "title": task.title,
            "description": task.description,
            "priority": task.priority,
            "due_date": task.due_date,
            "category_ids": [category.id for category in categories],
            **(history_extra or {}),
        }
        task_history.record(self.session, task.id, user_id, ChangeType.created, change_data)
        await self.session.commit()
        logger.info(f"Created task {task.id} for user {user_id}")
        return task

    async def replace(self, task_id: str, user_id: str, data: TaskCreate) -> Task:
        """Full update; categories are only replaced when given."""
        task = await self.get_owned(task_id, user_id)
        changes = data.model_dump(exclude=CATEGORY_FIELDS)
        return await self._apply(task, user_id, changes, data.resolved_category_ids())

    async def patch(self, task_id: str, user_id: str, data: TaskUpdate) -> Task:
        """Partial update; only fields present in the body are touched."""
        task = await self.get_owned(task_id, user_id)
        changes = data.model_dump(exclude_unset=True, exclude=CATEGORY_FIELDS)
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise ValidationFailedError("Title is required")
            changes["title"] = title
        if "priority" in changes and changes["priority"] is None:
            del changes["priority"]
        return await self._apply(task, user_id, changes, data.resolved_category_ids())

    async def _apply(
        self,
        task: Task,
        user_id: str,
        changes: Dict[str, Any],
        category_ids: Optional[List[str]],
    ) -> Task:
        await self._check_relations(user_id, changes, task_id=task.id)
        before = task_history.snapshot(task)
        if category_ids is not None:
            task.categories = await self.resolve_categories(user_id, category_ids)
        for field, value in changes.items():
            setattr(task, field, value)

        diff = task_history.extract_task_changes(before, task_history.snapshot(task))
        if not diff:
            return task
        await self.tasks.update(task)
        task_history.record(
            self.session,
            task.id,
            user_id,
            task_history.change_type_for(before, diff),
            diff,
            {field: before[field] for field in diff},
        )
        await self.session.commit()
        return task

    async def delete(self, task_id: str, user_id: str) -> None:
        """Delete a task; subtasks go with it and a DELETED entry is kept."""
        task = await self.get_owned(task_id, user_id)
        previous = {"title": task.title, "task_id": task.id}
        await self.tasks.delete(task)
        task_history.record(
            self.session,
            task_id,
            user_id,
            ChangeType.deleted,
            {"deleted_at": utc_now()},
            previous,
        )
        await self.session.commit()
        logger.info(f"Deleted task {task_id}")

    async def list_history(self, task_id: str, user_id: str) -> List[TaskHistoryRead]:
        """
        History of a task, newest first.

        Deleted tasks keep their history; it stays readable by the user who
        owned them.
        """
        task = await self.tasks.get_by_id(task_id)
        if task is not None and task.user_id != user_id:
            raise ForbiddenError()
        entries = await self.history.list_for_task(task_id, user_id)
        if task is None and not entries:
            raise NotFoundError("Task")
        return [TaskHistoryRead.from_entity(entry) for entry in entries]
