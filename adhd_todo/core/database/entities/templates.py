"""
Task template entity model.

Templates are reusable task blueprints. A template may describe its own
recurrence; actual scheduling lives in ``recurring_tasks``.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from adhd_todo.core.models.domain.enums import Emotion, Priority

from ..base import Base, new_id, utc_now
from .categories import Category, TemplateCategoryLink


class TaskTemplate(Base, table=True):
    """Reusable task blueprint owned by a user.

    Table: task_templates
    """

    __tablename__ = "task_templates"
    __table_args__ = (
        UniqueConstraint("name", "user_id", name="uq_task_templates_name_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    priority: Priority = Field(default=Priority.medium)
    estimated_duration: Optional[int] = Field(default=None, ge=0, description="Minutes")
    emotion: Optional[Emotion] = Field(default=None)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    is_recurring: bool = Field(default=False)
    recurrence: Optional[str] = Field(default=None, description="JSON recurrence pattern")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    categories: List[Category] = Relationship(
        link_model=TemplateCategoryLink,
        sa_relationship_kwargs={"lazy": "selectin"},
    )

    def get_recurrence(self) -> Optional[Dict[str, Any]]:
        """Get the recurrence pattern as a dict."""
        if not self.recurrence:
            return None
        try:
            value = json.loads(self.recurrence)
        except (json.JSONDecodeError, TypeError):
            return None
        return value if isinstance(value, dict) else None

    def set_recurrence(self, recurrence: Optional[Dict[str, Any]]) -> None:
        self.recurrence = json.dumps(recurrence) if recurrence else None

    def __repr__(self) -> str:
        return f"TaskTemplate(name={self.name!r}, priority={self.priority})"
