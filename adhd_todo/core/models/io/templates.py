"""
Task template I/O models.

Templates are returned in a flattened shape: ``description`` and
``estimated_duration`` are never null, and categories are reduced to ids.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from adhd_todo.core.models.domain.enums import Emotion, Priority

from .common import UTCDateTime, Weekday


class TemplateRecurrence(BaseModel):
    """Recurrence hint stored on a template."""

    frequency: Literal["daily", "weekly", "monthly"]
    interval: int = Field(default=1, ge=1)
    days_of_week: Optional[List[Weekday]] = Field(default=None, description="0 = Sunday ... 6 = Saturday")
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class TemplateRead(BaseModel):
    """Formatted template."""

    id: str
    name: str
    description: str = ""
    priority: Priority
    estimated_duration: int = 0
    emotion: Optional[Emotion] = None
    category_ids: List[str] = Field(default_factory=list)
    is_recurring: bool = False
    recurrence: Optional[TemplateRecurrence] = None

    @classmethod
    def from_entity(cls, template) -> "TemplateRead":
        return cls(
            id=template.id,
            name=template.name,
            description=template.description or "",
            priority=template.priority,
            estimated_duration=template.estimated_duration or 0,
            emotion=template.emotion,
            category_ids=[c.id for c in template.categories],
            is_recurring=template.is_recurring,
            recurrence=template.get_recurrence(),
        )


class TemplateCreate(BaseModel):
    """Schema for creating a template."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Priority = Priority.medium
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    emotion: Optional[Emotion] = None
    category_ids: List[str] = Field(default_factory=list)
    is_recurring: bool = False
    recurrence: Optional[TemplateRecurrence] = None


class TemplateUpdate(BaseModel):
    """Schema for updating a template. Omitted fields stay unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    emotion: Optional[Emotion] = None
    category_ids: Optional[List[str]] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[TemplateRecurrence] = None


class TemplateInstantiate(BaseModel):
    """Options for turning a template into a task."""

    due_date: Optional[UTCDateTime] = None


class TemplateEnvelope(BaseModel):
    template: TemplateRead


class TemplateList(BaseModel):
    templates: List[TemplateRead]
