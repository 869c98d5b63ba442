"""
Recurring task I/O models for API requests and responses.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from adhd_todo.core.models.domain.enums import RecurrenceFrequency

from .common import UTCDateTime, Weekday
from .tasks import TaskRead
from .templates import TemplateRead


class RecurringTaskRead(BaseModel):
    """Schema for reading a recurring schedule."""

    id: str
    template_id: str
    user_id: str
    next_due_date: datetime
    frequency: RecurrenceFrequency
    interval: int
    days_of_week: Optional[List[int]] = None
    day_of_month: Optional[int] = None
    month_of_year: Optional[int] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    count: Optional[int] = None
    last_generated_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    template: Optional[TemplateRead] = None
    preview_occurrences: Optional[List[datetime]] = None
    recent_tasks: Optional[List[TaskRead]] = None

    @classmethod
    def from_entity(cls, schedule, **extra) -> "RecurringTaskRead":
        days = json.loads(schedule.days_of_week) if schedule.days_of_week else None
        return cls(
            id=schedule.id,
            template_id=schedule.template_id,
            user_id=schedule.user_id,
            next_due_date=schedule.next_due_date,
            frequency=schedule.frequency,
            interval=schedule.interval,
            days_of_week=days,
            day_of_month=schedule.day_of_month,
            month_of_year=schedule.month_of_year,
            start_date=schedule.start_date,
            end_date=schedule.end_date,
            count=schedule.count,
            last_generated_date=schedule.last_generated_date,
            created_at=schedule.created_at,
            updated_at=schedule.updated_at,
            template=TemplateRead.from_entity(schedule.template) if schedule.template else None,
            **extra,
        )


class RecurringTaskCreate(BaseModel):
    """Schema for creating a recurring schedule for a template."""

    template_id: str
    frequency: RecurrenceFrequency = RecurrenceFrequency.daily
    interval: int = Field(default=1, ge=1)
    days_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    month_of_year: Optional[int] = Field(default=None, ge=1, le=12)
    start_date: Optional[UTCDateTime] = Field(default=None, description="Defaults to now")
    next_due_date: Optional[UTCDateTime] = Field(default=None, description="Defaults to start_date")
    end_date: Optional[UTCDateTime] = None
    count: Optional[int] = Field(default=None, ge=1)


class RecurringTaskUpdate(BaseModel):
    """Schema for partially updating a recurring schedule."""

    frequency: Optional[RecurrenceFrequency] = None
    interval: Optional[int] = Field(default=None, ge=1)
    days_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    month_of_year: Optional[int] = Field(default=None, ge=1, le=12)
    start_date: Optional[UTCDateTime] = None
    next_due_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    count: Optional[int] = Field(default=None, ge=1)


class RecurrencePreviewRequest(BaseModel):
    """Pattern to preview without saving anything."""

    start_date: UTCDateTime
    frequency: RecurrenceFrequency = RecurrenceFrequency.daily
    interval: int = Field(default=1, ge=1)
    days_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    month_of_year: Optional[int] = Field(default=None, ge=1, le=12)
    end_date: Optional[UTCDateTime] = None
    count: int = Field(default=5, ge=1, le=50)


class RecurrencePreviewResponse(BaseModel):
    occurrences: List[datetime]


class GenerateRequest(BaseModel):
    """Restrict generation to specific schedules; all due schedules otherwise."""

    task_ids: Optional[List[str]] = Field(default=None, description="Recurring schedule ids")


class GenerateResponse(BaseModel):
    generated_tasks: List[TaskRead]
    count: int
    message: str


class RecurringTaskEnvelope(BaseModel):
    recurring_task: RecurringTaskRead


class RecurringTaskList(BaseModel):
    recurring_tasks: List[RecurringTaskRead]
