"""
API endpoints for task templates.

Templates are reusable blueprints for tasks. A user who has none gets the
starter set on first listing. ``POST /{id}/instantiate`` turns a template
into a real task.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, status

from adhd_todo.core.database.entities import TaskTemplate
from adhd_todo.core.database.repositories import TaskTemplateRepository
from adhd_todo.core.errors import ConflictError, NotFoundError
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.core.models.io.tasks import TaskCreate, TaskEnvelope
from adhd_todo.core.models.io.templates import (
    TemplateCreate,
    TemplateEnvelope,
    TemplateInstantiate,
    TemplateList,
    TemplateRead,
    TemplateUpdate,
)
from adhd_todo.server.services.defaults import seed_default_templates
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep
from adhd_todo.server.services.tasks import TaskService

router = APIRouter(tags=["templates"])

DUPLICATE_NAME = "A template with this name already exists"


async def _get_owned(repo: TaskTemplateRepository, template_id: str, user_id: str) -> TaskTemplate:
    template = await repo.get_for_user(template_id, user_id)
    if template is None:
        raise NotFoundError("Template")
    return template


@router.get(
    "",
    response_model=TemplateList,
    summary="List Templates",
    description="List the current user's templates. The starter templates are created if the user has none.",
)
async def list_templates(session: SessionDep, user: CurrentUserDep) -> TemplateList:
    repo = TaskTemplateRepository(session)
    if await repo.count_for_user(user.id) == 0:
        await seed_default_templates(session, user.id)
        await session.commit()
    templates = await repo.list_for_user(user.id)
    return TemplateList(templates=[TemplateRead.from_entity(t) for t in templates])


@router.post(
    "",
    response_model=TemplateEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Template",
    description="Create a task template.",
    responses={
        201: {"description": "Template created"},
        400: {"description": "Unknown category"},
        409: {"description": "A template with this name already exists"},
    },
)
async def create_template(data: TemplateCreate, session: SessionDep, user: CurrentUserDep) -> TemplateEnvelope:
    """
    Create a template.

    - **name**: Required, unique per user.
    - **priority**: Default MEDIUM.
    - **category_ids**: Categories copied onto tasks created from the template.
    - **recurrence**: Optional hint ``{frequency: daily|weekly|monthly, interval, days_of_week, day_of_month}``.
    """
    repo = TaskTemplateRepository(session)
    if await repo.find_by_name(user.id, data.name) is not None:
        raise ConflictError(DUPLICATE_NAME)
    categories = await TaskService(session).resolve_categories(user.id, list(dict.fromkeys(data.category_ids)))
    template = TaskTemplate(
        **data.model_dump(exclude={"category_ids", "recurrence"}),
        user_id=user.id,
        categories=categories,
    )
    template.set_recurrence(data.recurrence.model_dump(exclude_none=True) if data.recurrence else None)
    await repo.create(template)
    await session.commit()
    return TemplateEnvelope(template=TemplateRead.from_entity(template))


@router.get(
    "/{template_id}",
    response_model=TemplateEnvelope,
    summary="Get Template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: str, session: SessionDep, user: CurrentUserDep) -> TemplateEnvelope:
    template = await _get_owned(TaskTemplateRepository(session), template_id, user.id)
    return TemplateEnvelope(template=TemplateRead.from_entity(template))


@router.put(
    "/{template_id}",
    response_model=TemplateEnvelope,
    summary="Update Template",
    description="Update the given fields. Categories are replaced when `category_ids` is sent.",
    responses={
        400: {"description": "Unknown category"},
        404: {"description": "Template not found"},
        409: {"description": "Duplicate name"},
    },
)
async def update_template(
    template_id: str, data: TemplateUpdate, session: SessionDep, user: CurrentUserDep
) -> TemplateEnvelope:
    repo = TaskTemplateRepository(session)
    template = await _get_owned(repo, template_id, user.id)
    changes = data.model_dump(exclude_unset=True, exclude={"category_ids", "recurrence"})

    if changes.get("name") and await repo.find_by_name(user.id, changes["name"], exclude_id=template.id):
        raise ConflictError(DUPLICATE_NAME)
    for field in ("name", "priority", "is_recurring"):
        if field in changes and changes[field] is None:
            del changes[field]
    if data.category_ids is not None:
        template.categories = await TaskService(session).resolve_categories(
            user.id, list(dict.fromkeys(data.category_ids))
        )
    if "recurrence" in data.model_fields_set:
        template.set_recurrence(data.recurrence.model_dump(exclude_none=True) if data.recurrence else None)
    for field, value in changes.items():
        setattr(template, field, value)

    await repo.update(template)
    await session.commit()
    return TemplateEnvelope(template=TemplateRead.from_entity(template))


@router.delete(
    "/{template_id}",
    response_model=MessageResponse,
    summary="Delete Template",
    description="Delete a template together with any recurring schedule built on it.",
    responses={404: {"description": "Template not found"}},
)
async def delete_template(template_id: str, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    repo = TaskTemplateRepository(session)
    template = await _get_owned(repo, template_id, user.id)
    await repo.delete(template)
    await session.commit()
    return MessageResponse(message="Template deleted successfully")


@router.post(
    "/{template_id}/instantiate",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task From Template",
    description="Create a task carrying the template's name, priority, emotion, duration and categories.",
    responses={404: {"description": "Template not found"}},
)
async def instantiate_template(
    template_id: str,
    session: SessionDep,
    user: CurrentUserDep,
    data: Optional[TemplateInstantiate] = None,
) -> TaskEnvelope:
    """
    Instantiate a template.

    - **due_date**: Optional due date for the new task.
    """
    template = await _get_owned(TaskTemplateRepository(session), template_id, user.id)
    task_data = TaskCreate(
        title=template.name,
        description=template.description,
        priority=template.priority,
        emotion=template.emotion,
        estimated_duration=template.estimated_duration,
        due_date=data.due_date if data else None,
        category_ids=[category.id for category in template.categories],
    )
    service = TaskService(session)
    task = await service.create(user.id, task_data, history_extra={"source": "template", "template_id": template.id})
    return TaskEnvelope(task=await service.read(task))
