"""
Project and goal I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from adhd_todo.core.models.domain.enums import ProjectStatus

from .common import UTCDateTime


class GoalSummary(BaseModel):
    id: str
    name: str
    task_count: int = 0


class ProjectRead(BaseModel):
    """Project with its goals and aggregate counts."""

    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    status: ProjectStatus
    due_date: Optional[datetime] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
    goals: List[GoalSummary] = Field(default_factory=list)
    goal_count: int = 0
    task_count: int = 0


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=32)
    status: ProjectStatus = ProjectStatus.active
    due_date: Optional[UTCDateTime] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=32)
    status: Optional[ProjectStatus] = None
    due_date: Optional[UTCDateTime] = None


class GoalTask(BaseModel):
    id: str
    title: str
    completed: bool


class GoalRead(BaseModel):
    """Goal with its project name and connected tasks."""

    id: str
    name: str
    description: Optional[str] = None
    project_id: str
    project_name: str
    tasks: List[GoalTask] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class GoalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    project_id: str
    task_ids: List[str] = Field(default_factory=list, description="Existing tasks to connect")


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    project_id: Optional[str] = None
    task_ids: Optional[List[str]] = Field(default=None, description="Replaces the connected tasks")


class ProjectEnvelope(BaseModel):
    project: ProjectRead


class ProjectList(BaseModel):
    projects: List[ProjectRead]


class GoalEnvelope(BaseModel):
    goal: GoalRead


class GoalList(BaseModel):
    goals: List[GoalRead]
