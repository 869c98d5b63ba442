"""
Recurring task service.

Manages schedules and turns due schedules into concrete tasks. Generation
works through the schedules one at a time: a schedule that cannot produce a
task is logged and skipped, and everything that was generated commits
together at the end.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import RecurringTask, Task
from adhd_todo.core.database.repositories import (
    RecurringTaskRepository,
    TaskRepository,
    TaskTemplateRepository,
)
from adhd_todo.core.errors import ConflictError, InvalidRecurrenceError, NotFoundError, ValidationFailedError
from adhd_todo.core.models.domain.enums import ChangeType
from adhd_todo.core.models.io.recurring_tasks import (
    RecurrencePreviewRequest,
    RecurringTaskCreate,
    RecurringTaskRead,
    RecurringTaskUpdate,
)
from adhd_todo.core.recurrence import (
    RecurrencePattern,
    calculate_next_occurrence,
    generate_occurrences,
    parse_days_of_week,
)

from . import task_history
from .tasks import to_task_read

logger = logging.getLogger(__name__)

PREVIEW_COUNT = 5
RECENT_TASKS_COUNT = 5


def pattern_of(schedule: RecurringTask) -> RecurrencePattern:
    return RecurrencePattern(
        frequency=schedule.frequency,
        interval=schedule.interval,
        days_of_week=schedule.days_of_week,
        day_of_month=schedule.day_of_month,
        month_of_year=schedule.month_of_year,
    )


def _encode_days(days: Optional[List[int]]) -> Optional[str]:
    if not days:
        return None
    return json.dumps(parse_days_of_week(days))


def preview_occurrences(data: RecurrencePreviewRequest) -> List[datetime]:
    """Upcoming occurrences of an unsaved pattern."""
    pattern = RecurrencePattern(
        frequency=data.frequency,
        interval=data.interval,
        days_of_week=data.days_of_week,
        day_of_month=data.day_of_month,
        month_of_year=data.month_of_year,
    )
    try:
        return generate_occurrences(data.start_date, pattern, count=data.count, end_date=data.end_date)
    except InvalidRecurrenceError as e:
        raise ValidationFailedError(str(e)) from e


class RecurringTaskService:
    """Schedules built on task templates."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.schedules = RecurringTaskRepository(session)
        self.templates = TaskTemplateRepository(session)
        self.tasks = TaskRepository(session)

    async def get_owned(self, schedule_id: str, user_id: str, refresh: bool = False) -> RecurringTask:
        schedule = await self.schedules.get_for_user(schedule_id, user_id, refresh=refresh)
        if schedule is None:
            raise NotFoundError("Recurring task")
        return schedule

    @staticmethod
    def _validate_pattern(schedule: RecurringTask) -> None:
        try:
            calculate_next_occurrence(schedule.next_due_date, **_pattern_kwargs(schedule))
        except InvalidRecurrenceError as e:
            raise ValidationFailedError(str(e)) from e

    def to_read(self, schedule: RecurringTask, preview: bool = False, **extra: Any) -> RecurringTaskRead:
        if preview:
            extra["preview_occurrences"] = generate_occurrences(
                schedule.next_due_date,
                pattern_of(schedule),
                count=PREVIEW_COUNT,
                end_date=schedule.end_date,
                stop_at_calendar_end=True,
            )
        return RecurringTaskRead.from_entity(schedule, **extra)

    async def list_schedules(self, user_id: str, preview: bool = False) -> List[RecurringTaskRead]:
        schedules = await self.schedules.list_for_user(user_id)
        return [self.to_read(schedule, preview=preview) for schedule in schedules]

    async def get_detail(self, schedule_id: str, user_id: str) -> RecurringTaskRead:
        """Schedule with its most recently generated tasks."""
        schedule = await self.get_owned(schedule_id, user_id)
        recent = await self.tasks.list_for_schedule(schedule.id, limit=RECENT_TASKS_COUNT)
        return self.to_read(schedule, recent_tasks=[to_task_read(task) for task in recent])

    async def create(self, user_id: str, data: RecurringTaskCreate) -> RecurringTask:
        """
        Create a schedule for one of the user's templates.

        Raises:
            NotFoundError: the template does not exist or is not the user's
            ConflictError: the template already has a schedule
            ValidationFailedError: the pattern cannot produce an occurrence
        """
        template = await self.templates.get_for_user(data.template_id, user_id)
        if template is None:
            raise NotFoundError("Template")
        if await self.schedules.get_by_template(template.id, user_id) is not None:
            raise ConflictError("A recurring task already exists for this template")

        start_date = data.start_date or utc_now()
        schedule = RecurringTask(
            template_id=template.id,
            user_id=user_id,
            frequency=data.frequency,
            interval=data.interval,
            days_of_week=_encode_days(data.days_of_week),
            day_of_month=data.day_of_month,
            month_of_year=data.month_of_year,
            start_date=start_date,
            next_due_date=data.next_due_date or start_date,
            end_date=data.end_date,
            count=data.count,
            template=template,
        )
        self._validate_pattern(schedule)
        await self.schedules.create(schedule)
        await self.session.commit()
        logger.info(f"Created recurring task {schedule.id} for template {template.id}")
        return schedule

    async def update(self, schedule_id: str, user_id: str, data: RecurringTaskUpdate) -> RecurringTask:
        schedule = await self.get_owned(schedule_id, user_id)
        changes = data.model_dump(exclude_unset=True)
        if "days_of_week" in changes:
            changes["days_of_week"] = _encode_days(changes["days_of_week"])
        for field in ("frequency", "interval", "start_date", "next_due_date"):
            if field in changes and changes[field] is None:
                del changes[field]
        for field, value in changes.items():
            setattr(schedule, field, value)
        self._validate_pattern(schedule)
        await self.schedules.update(schedule)
        await self.session.commit()
        return schedule

    async def delete(self, schedule_id: str, user_id: str) -> None:
        """Delete a schedule. Tasks it already generated are kept."""
        schedule = await self.get_owned(schedule_id, user_id)
        await self.schedules.delete(schedule)
        await self.session.commit()

    async def generate(self, user_id: str, schedule_ids: Optional[List[str]] = None) -> List[Task]:
        """
        Create the next task of each schedule.

        Args:
            user_id: Owner
            schedule_ids: Process only these schedules; all due schedules otherwise

        Returns:
            The generated tasks
        """
        now = utc_now()
        if schedule_ids:
            schedules = await self.schedules.get_many_for_user(schedule_ids, user_id)
        else:
            schedules = await self.schedules.list_due(user_id, now)

        generated: List[Task] = []
        for schedule in schedules:
            try:
                task = await self._generate_one(schedule, now)
            except (ValueError, OverflowError, LookupError) as e:
                # InvalidRecurrenceError is a ValueError
                logger.error(f"Error processing recurring task {schedule.id}: {type(e).__name__}: {e}")
                continue
            if task is not None:
                generated.append(task)

        if generated:
            await self.session.commit()
        logger.info(f"Generated {len(generated)} tasks for user {user_id}")
        return generated

    async def _generate_one(self, schedule: RecurringTask, now: datetime) -> Optional[Task]:
        if schedule.end_date is not None and schedule.end_date < schedule.next_due_date:
            logger.debug(f"Recurring task {schedule.id} ended on {schedule.end_date}")
            return None
        if schedule.count is not None and await self.tasks.count_for_schedule(schedule.id) >= schedule.count:
            logger.debug(f"Recurring task {schedule.id} reached its count of {schedule.count}")
            return None
        template = schedule.template
        if template is None:
            raise LookupError(f"Template with id {schedule.template_id} not found")
        next_due_date = calculate_next_occurrence(schedule.next_due_date, **_pattern_kwargs(schedule))

        task = Task(
            user_id=schedule.user_id,
            title=template.name,
            description=template.description,
            priority=template.priority,
            emotion=template.emotion,
            estimated_duration=template.estimated_duration,
            due_date=schedule.next_due_date,
            recurring_task_id=schedule.id,
            categories=list(template.categories),
        )
        self.session.add(task)
        task_history.record(
            self.session,
            task.id,
            schedule.user_id,
            ChangeType.created,
            {"source": "recurring", "recurring_task_id": schedule.id, "template_id": template.id},
        )
        schedule.next_due_date = next_due_date
        schedule.last_generated_date = now
        schedule.updated_at = now
        self.session.add(schedule)
        return task


def _pattern_kwargs(schedule: RecurringTask) -> Dict[str, Any]:
    return {
        "frequency": schedule.frequency,
        "interval": schedule.interval,
        "days_of_week": schedule.days_of_week,
        "day_of_month": schedule.day_of_month,
        "month_of_year": schedule.month_of_year,
    }
