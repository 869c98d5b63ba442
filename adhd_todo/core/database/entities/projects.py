"""
Project and goal entity models.

Goals belong to a project and are owned through it; they carry no user
column of their own.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from adhd_todo.core.models.domain.enums import ProjectStatus

from ..base import Base, new_id, utc_now


class Project(Base, table=True):
    """Top-level container for goals.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None)
    color: Optional[str] = Field(default=None, max_length=32)
    status: ProjectStatus = Field(default=ProjectStatus.active)
    due_date: Optional[datetime] = Field(default=None)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Goal(Base, table=True):
    """Outcome within a project that tasks contribute to.

    Table: goals
    """

    __tablename__ = "goals"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    project_id: str = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
