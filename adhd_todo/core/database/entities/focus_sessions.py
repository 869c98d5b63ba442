"""
Focus session entity model.

Records a block of focused work. Extra details from the client such as the
ambient sound or brainwave type go into ``session_metadata`` as JSON text.
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import Field, Relationship

from ..base import Base, new_id, utc_now
from .tasks import Task


class FocusSession(Base, table=True):
    """Completed or running focus session.

    Table: focus_sessions
    """

    __tablename__ = "focus_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    start_time: datetime = Field(index=True)
    end_time: Optional[datetime] = Field(default=None)
    duration: int = Field(default=0, ge=0, description="Minutes")
    type: str = Field(default="pomodoro", max_length=64)
    notes: Optional[str] = Field(default=None)
    session_metadata: str = Field(default="{}", description="JSON object")
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    task_id: Optional[str] = Field(default=None, foreign_key="tasks.id", ondelete="SET NULL", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    task: Optional[Task] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    def get_metadata(self) -> Dict[str, Any]:
        try:
            value = json.loads(self.session_metadata) if self.session_metadata else {}
        except (json.JSONDecodeError, TypeError):
            return {}
        return value if isinstance(value, dict) else {}

    def set_metadata(self, value: Dict[str, Any]) -> None:
        self.session_metadata = json.dumps(value)
