"""
User settings entity model.

One row per user holding UI preferences, notification options and the two
nested preference groups (focus mode, AI assistant) stored as JSON text.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now

DEFAULT_FOCUS_MODE: Dict[str, Any] = {
    "default_duration": 25,
    "break_duration": 5,
    "long_break_duration": 15,
    "sessions_until_long_break": 4,
    "auto_start_breaks": False,
    "auto_start_next_session": False,
    "default_sound_type": "ambient",
    "default_sound": "white-noise.mp3",
    "sound_volume": 50,
}

DEFAULT_AI_ASSISTANT: Dict[str, Any] = {
    "default_model": "gemini-2.0-flash-lite",
    "auto_suggest_ai_help": True,
}


class UserSettings(Base, table=True):
    """Per-user preferences.

    Table: user_settings
    """

    __tablename__ = "user_settings"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", unique=True, index=True)

    theme: str = Field(default="system", max_length=16)
    timezone: str = Field(default="UTC", max_length=64)
    week_starts_on: int = Field(default=0, description="0 = Sunday ... 6 = Saturday")
    hour_format: str = Field(default="12", max_length=2)
    enable_notifications: bool = Field(default=True)
    notification_sound: str = Field(default="bell.mp3", max_length=255)
    notification_volume: int = Field(default=80)
    language: str = Field(default="en", max_length=16)
    date_format: str = Field(default="MM/DD/YYYY", max_length=32)

    # Nested preference groups (stored as JSON strings for SQLModel compatibility)
    focus_mode: str = Field(default_factory=lambda: json.dumps(DEFAULT_FOCUS_MODE))
    ai_assistant: str = Field(default_factory=lambda: json.dumps(DEFAULT_AI_ASSISTANT))

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_focus_mode(self) -> Dict[str, Any]:
        """Get focus mode preferences merged over the defaults."""
        return {**DEFAULT_FOCUS_MODE, **_loads(self.focus_mode)}

    def set_focus_mode(self, value: Dict[str, Any]) -> None:
        self.focus_mode = json.dumps(value)

    def get_ai_assistant(self) -> Dict[str, Any]:
        """Get AI assistant preferences merged over the defaults."""
        return {**DEFAULT_AI_ASSISTANT, **_loads(self.ai_assistant)}

    def set_ai_assistant(self, value: Dict[str, Any]) -> None:
        self.ai_assistant = json.dumps(value)


def _loads(raw: Optional[str]) -> Dict[str, Any]:
    try:
        value = json.loads(raw) if raw else {}
    except (json.JSONDecodeError, TypeError):
        return {}
    return value if isinstance(value, dict) else {}
