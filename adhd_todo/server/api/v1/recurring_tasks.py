"""
API endpoints for recurring tasks.

A recurring task is a schedule over one template. ``/generate`` turns due
schedules into tasks; ``/preview`` computes upcoming dates for a pattern
without saving anything.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status

from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.core.models.io.recurring_tasks import (
    GenerateRequest,
    GenerateResponse,
    RecurrencePreviewRequest,
    RecurrencePreviewResponse,
    RecurringTaskCreate,
    RecurringTaskEnvelope,
    RecurringTaskList,
    RecurringTaskUpdate,
)
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep
from adhd_todo.server.services.recurring import RecurringTaskService, preview_occurrences
from adhd_todo.server.services.tasks import to_task_read

router = APIRouter(tags=["recurring-tasks"])


@router.get(
    "",
    response_model=RecurringTaskList,
    summary="List Recurring Tasks",
    description="List schedules ordered by next due date, each with its template.",
)
async def list_recurring_tasks(
    session: SessionDep,
    user: CurrentUserDep,
    preview: bool = Query(default=False, description="Include the next 5 occurrences of each schedule"),
) -> RecurringTaskList:
    schedules = await RecurringTaskService(session).list_schedules(user.id, preview=preview)
    return RecurringTaskList(recurring_tasks=schedules)


@router.post(
    "",
    response_model=RecurringTaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Recurring Task",
    description="Schedule one of the user's templates. A template can have only one schedule.",
    responses={
        201: {"description": "Schedule created"},
        400: {"description": "Pattern cannot produce an occurrence"},
        404: {"description": "Template not found"},
        409: {"description": "The template already has a schedule"},
    },
)
async def create_recurring_task(
    data: RecurringTaskCreate, session: SessionDep, user: CurrentUserDep
) -> RecurringTaskEnvelope:
    """
    Create a recurring schedule.

    - **template_id**: Template to generate tasks from.
    - **frequency**: DAILY, WEEKLY, MONTHLY, YEARLY or CUSTOM (every *interval* days).
    - **interval**: Step in units of the frequency, at least 1.
    - **days_of_week**: WEEKLY only; 0 = Sunday ... 6 = Saturday.
    - **day_of_month** / **month_of_year**: MONTHLY and YEARLY anchors.
    - **start_date**: Defaults to now. **next_due_date** defaults to the start date.
    - **end_date** / **count**: Optional stop conditions.
    """
    service = RecurringTaskService(session)
    schedule = await service.create(user.id, data)
    return RecurringTaskEnvelope(recurring_task=service.to_read(schedule))


@router.post(
    "/preview",
    response_model=RecurrencePreviewResponse,
    summary="Preview Occurrences",
    description="Compute the next occurrences of a pattern after the start date. Nothing is saved.",
    responses={400: {"description": "Pattern cannot produce an occurrence"}},
)
async def preview_recurrence(data: RecurrencePreviewRequest, user: CurrentUserDep) -> RecurrencePreviewResponse:
    return RecurrencePreviewResponse(occurrences=preview_occurrences(data))


@router.post(
    "/generate",
    response_model=GenerateResponse,
    summary="Generate Tasks",
    description=(
        "Create the next task of every due schedule, or of the listed schedules. "
        "Schedules that fail are logged and skipped."
    ),
)
async def generate_tasks(
    session: SessionDep,
    user: CurrentUserDep,
    data: Optional[GenerateRequest] = None,
) -> GenerateResponse:
    """
    Generate tasks from schedules.

    - **task_ids**: Recurring schedule ids to process. When omitted, every
      schedule whose next due date has passed is processed.
    """
    tasks = await RecurringTaskService(session).generate(user.id, data.task_ids if data else None)
    count = len(tasks)
    return GenerateResponse(
        generated_tasks=[to_task_read(task) for task in tasks],
        count=count,
        message=f"Generated {count} tasks" if count else "No tasks were generated",
    )


@router.get(
    "/{recurring_task_id}",
    response_model=RecurringTaskEnvelope,
    summary="Get Recurring Task",
    description="Get a schedule with its template and the 5 most recently generated tasks.",
    responses={404: {"description": "Recurring task not found"}},
)
async def get_recurring_task(
    recurring_task_id: str, session: SessionDep, user: CurrentUserDep
) -> RecurringTaskEnvelope:
    return RecurringTaskEnvelope(recurring_task=await RecurringTaskService(session).get_detail(recurring_task_id, user.id))


@router.patch(
    "/{recurring_task_id}",
    response_model=RecurringTaskEnvelope,
    summary="Update Recurring Task",
    description="Change the pattern, dates or stop conditions of a schedule.",
    responses={400: {"description": "Invalid pattern"}, 404: {"description": "Recurring task not found"}},
)
async def update_recurring_task(
    recurring_task_id: str, data: RecurringTaskUpdate, session: SessionDep, user: CurrentUserDep
) -> RecurringTaskEnvelope:
    service = RecurringTaskService(session)
    schedule = await service.update(recurring_task_id, user.id, data)
    return RecurringTaskEnvelope(recurring_task=service.to_read(schedule))


@router.delete(
    "/{recurring_task_id}",
    response_model=MessageResponse,
    summary="Delete Recurring Task",
    description="Delete a schedule. Tasks it already generated are kept.",
    responses={404: {"description": "Recurring task not found"}},
)
async def delete_recurring_task(recurring_task_id: str, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    await RecurringTaskService(session).delete(recurring_task_id, user.id)
    return MessageResponse(message="Recurring task deleted successfully")
