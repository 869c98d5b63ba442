"""
API endpoints for goals.

Goals live inside projects and are owned through them. Tasks are connected
to a goal through ``task_ids``; sending ``task_ids`` on update replaces the
connected set.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from adhd_todo.core.database.entities import Goal, Project
from adhd_todo.core.database.repositories import GoalRepository, ProjectRepository, TaskRepository
from adhd_todo.core.errors import NotFoundError, ValidationFailedError
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.core.models.io.projects import (
    GoalCreate,
    GoalEnvelope,
    GoalList,
    GoalRead,
    GoalTask,
    GoalUpdate,
)
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["goals"])


async def build_goal_reads(session, rows: List[tuple]) -> List[GoalRead]:
    tasks_by_goal = await TaskRepository(session).list_for_goals([goal.id for goal, _ in rows])
    return [
        GoalRead(
            id=goal.id,
            name=goal.name,
            description=goal.description,
            project_id=goal.project_id,
            project_name=project.name,
            tasks=[
                GoalTask(id=task.id, title=task.title, completed=task.is_completed)
                for task in tasks_by_goal.get(goal.id, [])
            ],
            created_at=goal.created_at,
            updated_at=goal.updated_at,
        )
        for goal, project in rows
    ]


async def _owned_project(session, project_id: str, user_id: str) -> Project:
    project = await ProjectRepository(session).get_for_user(project_id, user_id)
    if project is None:
        raise NotFoundError("Project")
    return project


async def _connect_tasks(session, goal_id: str, task_ids: List[str], user_id: str) -> None:
    task_ids = list(dict.fromkeys(task_ids))
    repo = TaskRepository(session)
    owned = {task.id for task in await repo.get_many_for_user(task_ids, user_id)}
    missing = [task_id for task_id in task_ids if task_id not in owned]
    if missing:
        raise ValidationFailedError(f"Invalid task ids: {', '.join(missing)}")
    await repo.assign_goal(task_ids, goal_id)


@router.get(
    "",
    response_model=GoalList,
    summary="List Goals",
    description="List goals of the current user's projects, newest first, with project name and tasks.",
)
async def list_goals(
    session: SessionDep,
    user: CurrentUserDep,
    project_id: Optional[str] = Query(default=None, description="Only goals of this project"),
    search: Optional[str] = Query(default=None, description="Substring of name or description"),
) -> GoalList:
    rows = await GoalRepository(session).list_for_user(user.id, project_id, search)
    return GoalList(goals=await build_goal_reads(session, rows))


@router.post(
    "",
    response_model=GoalEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Goal",
    responses={
        201: {"description": "Goal created"},
        400: {"description": "Unknown task id"},
        404: {"description": "Project not found"},
    },
)
async def create_goal(data: GoalCreate, session: SessionDep, user: CurrentUserDep) -> GoalEnvelope:
    """
    Create a goal in one of the user's projects.

    - **name**: Required.
    - **project_id**: Project the goal belongs to.
    - **task_ids**: Existing tasks to connect to the goal.
    """
    project = await _owned_project(session, data.project_id, user.id)
    goal = await GoalRepository(session).create(
        Goal(name=data.name, description=data.description, project_id=project.id)
    )
    await _connect_tasks(session, goal.id, data.task_ids, user.id)
    await session.commit()
    return GoalEnvelope(goal=(await build_goal_reads(session, [(goal, project)]))[0])


@router.get(
    "/{goal_id}",
    response_model=GoalEnvelope,
    summary="Get Goal",
    responses={404: {"description": "Goal not found"}},
)
async def get_goal(goal_id: str, session: SessionDep, user: CurrentUserDep) -> GoalEnvelope:
    row = await GoalRepository(session).get_for_user(goal_id, user.id)
    if row is None:
        raise NotFoundError("Goal")
    return GoalEnvelope(goal=(await build_goal_reads(session, [row]))[0])


@router.patch(
    "/{goal_id}",
    response_model=GoalEnvelope,
    summary="Update Goal",
    description="Update a goal. `task_ids` replaces the connected tasks; `project_id` moves the goal.",
    responses={400: {"description": "Unknown task id"}, 404: {"description": "Goal or project not found"}},
)
async def update_goal(goal_id: str, data: GoalUpdate, session: SessionDep, user: CurrentUserDep) -> GoalEnvelope:
    repo = GoalRepository(session)
    row = await repo.get_for_user(goal_id, user.id)
    if row is None:
        raise NotFoundError("Goal")
    goal, project = row

    changes = data.model_dump(exclude_unset=True, exclude={"task_ids"})
    if changes.get("project_id") and changes["project_id"] != goal.project_id:
        project = await _owned_project(session, changes["project_id"], user.id)
    for field in ("name", "project_id"):
        if field in changes and changes[field] is None:
            del changes[field]
    for field, value in changes.items():
        setattr(goal, field, value)
    await repo.update(goal)

    if data.task_ids is not None:
        await TaskRepository(session).clear_goal(goal.id)
        await _connect_tasks(session, goal.id, data.task_ids, user.id)
    await session.commit()
    return GoalEnvelope(goal=(await build_goal_reads(session, [(goal, project)]))[0])


@router.delete(
    "/{goal_id}",
    response_model=MessageResponse,
    summary="Delete Goal",
    description="Delete a goal. Its tasks are kept and disconnected.",
    responses={404: {"description": "Goal not found"}},
)
async def delete_goal(goal_id: str, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    repo = GoalRepository(session)
    row = await repo.get_for_user(goal_id, user.id)
    if row is None:
        raise NotFoundError("Goal")
    await repo.delete(row[0])
    await session.commit()
    return MessageResponse(message="Goal deleted successfully")
