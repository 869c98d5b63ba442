"""
Recurring task schedule entity model.

A schedule points at a template and remembers when the next concrete task is
due. The recurrence fields mirror the arguments of
``adhd_todo.core.recurrence.calculate_next_occurrence``.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from adhd_todo.core.models.domain.enums import RecurrenceFrequency

from ..base import Base, new_id, utc_now
from .templates import TaskTemplate


class RecurringTask(Base, table=True):
    """Schedule producing tasks from a template.

    Table: recurring_tasks
    """

    __tablename__ = "recurring_tasks"
    __table_args__ = (
        UniqueConstraint("template_id", "user_id", name="uq_recurring_tasks_template_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    template_id: str = Field(foreign_key="task_templates.id", ondelete="CASCADE", index=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    next_due_date: datetime = Field(index=True)
    frequency: RecurrenceFrequency = Field(default=RecurrenceFrequency.daily)
    interval: int = Field(default=1, ge=1)
    days_of_week: Optional[str] = Field(default=None, description='JSON array, 0 = Sunday, e.g. "[1,3,5]"')
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    month_of_year: Optional[int] = Field(default=None, ge=1, le=12)
    start_date: datetime = Field(default_factory=utc_now)
    end_date: Optional[datetime] = Field(default=None)
    count: Optional[int] = Field(default=None, ge=1, description="Stop after this many generated tasks")
    last_generated_date: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    template: Optional[TaskTemplate] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    def __repr__(self) -> str:
        return f"RecurringTask(template_id={self.template_id}, frequency={self.frequency}, next={self.next_due_date})"
