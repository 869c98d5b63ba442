"""
API endpoints for managing tasks.

Tasks carry categories, optional subtasks and an audit trail. Every write
records a history entry; ``GET /{task_id}/history`` returns it, including for
tasks that have since been deleted.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status

from adhd_todo.core.models.io.common import SuccessResponse
from adhd_todo.core.models.io.tasks import (
    TaskCreate,
    TaskDetailEnvelope,
    TaskEnvelope,
    TaskHistoryList,
    TaskList,
    TaskUpdate,
)
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep
from adhd_todo.server.services.tasks import TaskService

router = APIRouter(tags=["tasks"])

_OWNERSHIP_RESPONSES = {
    403: {"description": "Task belongs to another user"},
    404: {"description": "Task not found"},
}


@router.get(
    "",
    response_model=TaskList,
    summary="List Tasks",
    description="List the current user's tasks, newest first, each with categories and subtasks.",
    response_description="Tasks matching the filters.",
)
async def list_tasks(
    session: SessionDep,
    user: CurrentUserDep,
    completed: Optional[bool] = Query(default=None, description="Only completed (true) or open (false) tasks"),
    category_id: Optional[str] = Query(default=None, description="Only tasks carrying this category"),
    goal_id: Optional[str] = Query(default=None, description="Only tasks connected to this goal"),
    search: Optional[str] = Query(default=None, description="Substring of title or description"),
) -> TaskList:
    """
    List tasks.

    - **completed**: Filter on completion state.
    - **category_id**: Filter on a category.
    - **goal_id**: Filter on a goal.
    - **search**: Case-insensitive text search.
    """
    tasks = await TaskService(session).list_tasks(user.id, completed, category_id, goal_id, search)
    return TaskList(tasks=tasks)


@router.post(
    "",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task. Categories may be sent as `category_ids` or as `categories` (ids or {id} objects).",
    response_description="The created task.",
    responses={
        201: {"description": "Task created"},
        400: {"description": "Unknown category, goal or parent task"},
    },
)
async def create_task(data: TaskCreate, session: SessionDep, user: CurrentUserDep) -> TaskEnvelope:
    """
    Create a task.

    - **title**: Required, 1 to 255 characters.
    - **priority**: NONE, LOW, MEDIUM, HIGH or URGENT (default NONE).
    - **emotion**: How the task feels: EXCITED, NEUTRAL, ANXIOUS, OVERWHELMED or CONFIDENT.
    - **due_date**, **estimated_duration**, **goal_id**, **parent_id**: Optional.
    """
    service = TaskService(session)
    task = await service.create(user.id, data)
    return TaskEnvelope(task=await service.read(task))


@router.get(
    "/{task_id}",
    response_model=TaskDetailEnvelope,
    summary="Get Task",
    description="Get a task with its subtasks and the ten most recent history entries.",
    responses=_OWNERSHIP_RESPONSES,
)
async def get_task(task_id: str, session: SessionDep, user: CurrentUserDep) -> TaskDetailEnvelope:
    return TaskDetailEnvelope(task=await TaskService(session).get_detail(task_id, user.id))


@router.put(
    "/{task_id}",
    response_model=TaskEnvelope,
    summary="Replace Task",
    description="Replace a task's fields. Categories are replaced when given and kept otherwise.",
    responses={**_OWNERSHIP_RESPONSES, 400: {"description": "Unknown category, goal or parent task"}},
)
async def replace_task(task_id: str, data: TaskCreate, session: SessionDep, user: CurrentUserDep) -> TaskEnvelope:
    """
    Replace a task.

    Setting **completed_at** on an open task records a COMPLETED history
    entry; any other change records UPDATED.
    """
    service = TaskService(session)
    task = await service.replace(task_id, user.id, data)
    return TaskEnvelope(task=await service.read(task))


@router.patch(
    "/{task_id}",
    response_model=TaskEnvelope,
    summary="Update Task",
    description="Update only the fields present in the body. An empty category list clears the categories.",
    responses={**_OWNERSHIP_RESPONSES, 400: {"description": "Unknown category, goal or parent task"}},
)
async def update_task(task_id: str, data: TaskUpdate, session: SessionDep, user: CurrentUserDep) -> TaskEnvelope:
    service = TaskService(session)
    task = await service.patch(task_id, user.id, data)
    return TaskEnvelope(task=await service.read(task))


@router.delete(
    "/{task_id}",
    response_model=SuccessResponse,
    summary="Delete Task",
    description="Delete a task and its subtasks. The history is kept.",
    responses=_OWNERSHIP_RESPONSES,
)
async def delete_task(task_id: str, session: SessionDep, user: CurrentUserDep) -> SuccessResponse:
    await TaskService(session).delete(task_id, user.id)
    return SuccessResponse()


@router.get(
    "/{task_id}/history",
    response_model=TaskHistoryList,
    summary="Get Task History",
    description="Full change history of a task, newest first.",
    responses=_OWNERSHIP_RESPONSES,
)
async def get_task_history(task_id: str, session: SessionDep, user: CurrentUserDep) -> TaskHistoryList:
    return TaskHistoryList(history=await TaskService(session).list_history(task_id, user.id))
