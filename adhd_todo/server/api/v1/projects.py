"""
API endpoints for projects.

Projects group goals; each listed project carries its goals with task counts.
Deleting a project deletes its goals and disconnects their tasks.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from adhd_todo.core.database.entities import Project
from adhd_todo.core.database.repositories import GoalRepository, ProjectRepository
from adhd_todo.core.errors import NotFoundError
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.core.models.io.projects import (
    GoalSummary,
    ProjectCreate,
    ProjectEnvelope,
    ProjectList,
    ProjectRead,
    ProjectUpdate,
)
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["projects"])


async def build_project_reads(session, projects: List[Project]) -> List[ProjectRead]:
    """Attach goal summaries and task counts to projects."""
    goals_repo = GoalRepository(session)
    goals_by_project = await goals_repo.list_for_projects([project.id for project in projects])
    task_counts = await goals_repo.task_counts([goal.id for goals in goals_by_project.values() for goal in goals])

    reads = []
    for project in projects:
        goals = [
            GoalSummary(id=goal.id, name=goal.name, task_count=task_counts.get(goal.id, 0))
            for goal in goals_by_project.get(project.id, [])
        ]
        reads.append(
            ProjectRead(
                **project.model_dump(),
                goals=goals,
                goal_count=len(goals),
                task_count=sum(goal.task_count for goal in goals),
            )
        )
    return reads


async def _get_owned(repo: ProjectRepository, project_id: str, user_id: str) -> Project:
    project = await repo.get_for_user(project_id, user_id)
    if project is None:
        raise NotFoundError("Project")
    return project


@router.get(
    "",
    response_model=ProjectList,
    summary="List Projects",
    description="List the current user's projects, newest first, with goals and counts.",
)
async def list_projects(
    session: SessionDep,
    user: CurrentUserDep,
    search: Optional[str] = Query(default=None, description="Substring of name or description"),
) -> ProjectList:
    projects = await ProjectRepository(session).list_for_user(user.id, search)
    return ProjectList(projects=await build_project_reads(session, projects))


@router.post(
    "",
    response_model=ProjectEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    responses={201: {"description": "Project created"}},
)
async def create_project(data: ProjectCreate, session: SessionDep, user: CurrentUserDep) -> ProjectEnvelope:
    """
    Create a project.

    - **name**: 1 to 100 characters.
    - **status**: ACTIVE (default), COMPLETED or ARCHIVED.
    - **color**, **description**, **due_date**: Optional.
    """
    project = await ProjectRepository(session).create(Project(**data.model_dump(), user_id=user.id))
    await session.commit()
    return ProjectEnvelope(project=(await build_project_reads(session, [project]))[0])


@router.get(
    "/{project_id}",
    response_model=ProjectEnvelope,
    summary="Get Project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(project_id: str, session: SessionDep, user: CurrentUserDep) -> ProjectEnvelope:
    project = await _get_owned(ProjectRepository(session), project_id, user.id)
    return ProjectEnvelope(project=(await build_project_reads(session, [project]))[0])


@router.patch(
    "/{project_id}",
    response_model=ProjectEnvelope,
    summary="Update Project",
    responses={404: {"description": "Project not found"}},
)
async def update_project(
    project_id: str, data: ProjectUpdate, session: SessionDep, user: CurrentUserDep
) -> ProjectEnvelope:
    repo = ProjectRepository(session)
    project = await _get_owned(repo, project_id, user.id)
    changes = data.model_dump(exclude_unset=True)
    for field in ("name", "status"):
        if field in changes and changes[field] is None:
            del changes[field]
    for field, value in changes.items():
        setattr(project, field, value)
    await repo.update(project)
    await session.commit()
    return ProjectEnvelope(project=(await build_project_reads(session, [project]))[0])


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete Project",
    description="Delete a project and its goals. Tasks connected to those goals are kept and disconnected.",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(project_id: str, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    repo = ProjectRepository(session)
    project = await _get_owned(repo, project_id, user.id)
    await repo.delete(project)
    await session.commit()
    return MessageResponse(message="Project deleted successfully")
