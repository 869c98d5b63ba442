"""
Focus session I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime


class FocusTaskSummary(BaseModel):
    """The task a session was spent on."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    completed_at: Optional[datetime] = None


class FocusSessionRead(BaseModel):
    """Schema for reading a focus session."""

    id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: int
    type: str
    notes: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    task_id: Optional[str] = None
    task: Optional[FocusTaskSummary] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, focus_session, include_task: bool = True) -> "FocusSessionRead":
        task = None
        if include_task and focus_session.task is not None:
            task = FocusTaskSummary.model_validate(focus_session.task)
        return cls(
            id=focus_session.id,
            start_time=focus_session.start_time,
            end_time=focus_session.end_time,
            duration=focus_session.duration,
            type=focus_session.type,
            notes=focus_session.notes,
            metadata=focus_session.get_metadata(),
            task_id=focus_session.task_id,
            task=task,
            created_at=focus_session.created_at,
            updated_at=focus_session.updated_at,
        )


class FocusSessionCreate(BaseModel):
    """Record a session that just finished."""

    duration: int = Field(ge=0, le=24 * 60, description="Minutes")
    type: str = Field(default="pomodoro", min_length=1, max_length=64)
    task_id: Optional[str] = None
    ambient_sound: Optional[str] = None
    brainwave_type: Optional[str] = None
    notes: Optional[str] = None


class FocusSessionReplace(BaseModel):
    """Full update of a session."""

    start_time: UTCDateTime
    end_time: Optional[UTCDateTime] = None
    duration: int = Field(ge=0, le=24 * 60)
    type: str = Field(min_length=1, max_length=64)
    task_id: Optional[str] = None
    notes: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class FocusSessionPatch(BaseModel):
    """Partial update of a session; ``metadata`` keys are merged."""

    start_time: Optional[UTCDateTime] = None
    end_time: Optional[UTCDateTime] = None
    duration: Optional[int] = Field(default=None, ge=0, le=24 * 60)
    type: Optional[str] = Field(default=None, min_length=1, max_length=64)
    task_id: Optional[str] = None
    notes: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class DailyFocusStat(BaseModel):
    date: str = Field(description="YYYY-MM-DD")
    total_duration: int
    session_count: int


class FocusStats(BaseModel):
    total_duration: int
    daily_stats: List[DailyFocusStat]


class FocusSessionList(BaseModel):
    focus_sessions: List[FocusSessionRead]
    total: int
    stats: FocusStats


class FocusSessionEnvelope(BaseModel):
    focus_session: FocusSessionRead
