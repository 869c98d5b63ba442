"""
Task I/O models for API requests and responses.

Clients may send categories either as ``category_ids`` (a list of ids) or as
``categories`` (a list of ids or ``{"id": ...}`` objects). Both forms resolve
through ``resolved_category_ids``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adhd_todo.core.models.domain.enums import ChangeType, Emotion, Priority

from .categories import CategoryRead
from .common import UTCDateTime


class CategoryIdRef(BaseModel):
    """Category reference given as an object."""

    id: str


class TaskRead(BaseModel):
    """Schema for reading a task from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    priority: Priority
    emotion: Optional[Emotion] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    user_id: str
    goal_id: Optional[str] = None
    parent_id: Optional[str] = None
    recurring_task_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    categories: List[CategoryRead] = Field(default_factory=list)
    subtasks: List["TaskRead"] = Field(default_factory=list)


class TaskHistoryRead(BaseModel):
    """One history entry with its JSON payloads decoded."""

    id: str
    task_id: str
    change_type: ChangeType
    change_data: Dict[str, Any]
    previous_data: Optional[Dict[str, Any]] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, entry) -> "TaskHistoryRead":
        return cls(
            id=entry.id,
            task_id=entry.task_id,
            change_type=entry.change_type,
            change_data=entry.get_change_data(),
            previous_data=entry.get_previous_data(),
            created_at=entry.created_at,
        )


class TaskDetailRead(TaskRead):
    """Task with its most recent history."""

    history: List[TaskHistoryRead] = Field(default_factory=list)


class _CategoryInput(BaseModel):
    category_ids: Optional[List[str]] = Field(default=None, description="Category ids to attach")
    categories: Optional[List[Union[str, CategoryIdRef]]] = Field(
        default=None, description="Alternative form: ids or {id} objects"
    )

    def resolved_category_ids(self) -> Optional[List[str]]:
        """Category ids from whichever form was sent, ``None`` when neither was."""
        if self.category_ids is not None:
            return list(dict.fromkeys(self.category_ids))
        if self.categories is not None:
            ids = [c if isinstance(c, str) else c.id for c in self.categories]
            return list(dict.fromkeys(ids))
        return None


class TaskCreate(_CategoryInput):
    """Schema for creating (or fully replacing) a task."""

    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Priority = Priority.none
    emotion: Optional[Emotion] = None
    due_date: Optional[UTCDateTime] = None
    completed_at: Optional[UTCDateTime] = None
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    actual_duration: Optional[int] = Field(default=None, ge=0)
    goal_id: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class TaskUpdate(_CategoryInput):
    """Schema for partially updating a task. Omitted fields stay unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    emotion: Optional[Emotion] = None
    due_date: Optional[UTCDateTime] = None
    completed_at: Optional[UTCDateTime] = None
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    actual_duration: Optional[int] = Field(default=None, ge=0)
    goal_id: Optional[str] = None
    parent_id: Optional[str] = None


class TaskEnvelope(BaseModel):
    task: TaskRead


class TaskDetailEnvelope(BaseModel):
    task: TaskDetailRead


class TaskList(BaseModel):
    tasks: List[TaskRead]


class TaskHistoryList(BaseModel):
    history: List[TaskHistoryRead]
