"""
Task entity model.

A task belongs to one user and optionally to a goal, a parent task (making it
a subtask) and the recurring schedule that generated it.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, Relationship

from adhd_todo.core.models.domain.enums import Emotion, Priority

from ..base import Base, new_id, utc_now
from .categories import Category, TaskCategoryLink


class TaskBase(Base):
    """Base fields for a task."""

    title: str = Field(max_length=255, description="Short actionable title")
    description: Optional[str] = Field(default=None, description="Free-form details")
    priority: Priority = Field(default=Priority.none)
    emotion: Optional[Emotion] = Field(default=None, description="How the user feels about the task")
    due_date: Optional[datetime] = Field(default=None, index=True)
    completed_at: Optional[datetime] = Field(default=None, description="Set when the task is done")
    estimated_duration: Optional[int] = Field(default=None, ge=0, description="Minutes")
    actual_duration: Optional[int] = Field(default=None, ge=0, description="Minutes")


class Task(TaskBase, table=True):
    """Persistent task.

    Table: tasks
    """

    __tablename__ = "tasks"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    goal_id: Optional[str] = Field(default=None, foreign_key="goals.id", ondelete="SET NULL", index=True)
    parent_id: Optional[str] = Field(default=None, foreign_key="tasks.id", ondelete="CASCADE", index=True)
    recurring_task_id: Optional[str] = Field(
        default=None, foreign_key="recurring_tasks.id", ondelete="SET NULL", index=True
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    categories: List[Category] = Relationship(
        link_model=TaskCategoryLink,
        sa_relationship_kwargs={"lazy": "selectin"},
    )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __repr__(self) -> str:
        return f"Task(id={self.id}, title={self.title!r})"
