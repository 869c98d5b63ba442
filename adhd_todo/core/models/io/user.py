"""
User settings, profile and activity I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from adhd_todo.core.models.domain.enums import ChangeType, Theme

from .tasks import TaskHistoryRead


class FocusModeSettings(BaseModel):
    """Pomodoro-style timer preferences."""

    default_duration: int = Field(default=25, ge=1, le=240)
    break_duration: int = Field(default=5, ge=1, le=60)
    long_break_duration: int = Field(default=15, ge=1, le=120)
    sessions_until_long_break: int = Field(default=4, ge=1, le=10)
    auto_start_breaks: bool = False
    auto_start_next_session: bool = False
    default_sound_type: str = "ambient"
    default_sound: str = "white-noise.mp3"
    sound_volume: int = Field(default=50, ge=0, le=100)


class FocusModePatch(BaseModel):
    default_duration: Optional[int] = Field(default=None, ge=1, le=240)
    break_duration: Optional[int] = Field(default=None, ge=1, le=60)
    long_break_duration: Optional[int] = Field(default=None, ge=1, le=120)
    sessions_until_long_break: Optional[int] = Field(default=None, ge=1, le=10)
    auto_start_breaks: Optional[bool] = None
    auto_start_next_session: Optional[bool] = None
    default_sound_type: Optional[str] = None
    default_sound: Optional[str] = None
    sound_volume: Optional[int] = Field(default=None, ge=0, le=100)


class AIAssistantSettings(BaseModel):
    default_model: str = "gemini-2.0-flash-lite"
    auto_suggest_ai_help: bool = True


class AIAssistantPatch(BaseModel):
    default_model: Optional[str] = None
    auto_suggest_ai_help: Optional[bool] = None


class UserSettingsRead(BaseModel):
    """Effective settings; defaults are returned when nothing is stored."""

    theme: Theme = Theme.system
    timezone: str = "UTC"
    week_starts_on: int = 0
    hour_format: Literal["12", "24"] = "12"
    enable_notifications: bool = True
    notification_sound: str = "bell.mp3"
    notification_volume: int = 80
    focus_mode: FocusModeSettings = Field(default_factory=FocusModeSettings)
    ai_assistant: AIAssistantSettings = Field(default_factory=AIAssistantSettings)
    language: str = "en"
    date_format: str = "MM/DD/YYYY"


class UserSettingsUpdate(BaseModel):
    """Settings to store. Omitted fields keep their current value."""

    theme: Optional[Theme] = None
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=64)
    week_starts_on: Optional[int] = Field(default=None, ge=0, le=6)
    hour_format: Optional[Literal["12", "24"]] = None
    enable_notifications: Optional[bool] = None
    notification_sound: Optional[str] = None
    notification_volume: Optional[int] = Field(default=None, ge=0, le=100)
    focus_mode: Optional[FocusModePatch] = None
    ai_assistant: Optional[AIAssistantPatch] = None
    language: Optional[str] = Field(default=None, min_length=2, max_length=16)
    date_format: Optional[str] = Field(default=None, min_length=1, max_length=32)


class SettingsEnvelope(BaseModel):
    settings: UserSettingsRead


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = None
    image: Optional[str] = None


class ActivitySummary(BaseModel):
    total_changes: int
    summary_by_day: Dict[str, Dict[ChangeType, int]]
    recent_activity: List[TaskHistoryRead]


class TaskStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    tasks_due_today: int
    completion_rate: int = Field(description="Rounded percentage of completed tasks")


class ActivityResponse(BaseModel):
    activity: ActivitySummary
    stats: TaskStats
    period_days: int
    generated_at: datetime
