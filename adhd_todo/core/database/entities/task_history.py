"""
Task history entity model.

An append-only audit trail of task changes. Entries deliberately carry no
foreign key to ``tasks`` so DELETED entries remain readable after the task
row is gone.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import Field

from adhd_todo.core.models.domain.enums import ChangeType

from ..base import Base, new_id, utc_now


class TaskHistory(Base, table=True):
    """One recorded change of a task.

    Table: task_history
    """

    __tablename__ = "task_history"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    task_id: str = Field(index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    change_type: ChangeType
    change_data: str = Field(default="{}", description="JSON object of changed fields")
    previous_data: Optional[str] = Field(default=None, description="JSON object of prior values")
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def get_change_data(self) -> Dict[str, Any]:
        try:
            return json.loads(self.change_data) if self.change_data else {}
        except (json.JSONDecodeError, TypeError):
            return {}

    def get_previous_data(self) -> Optional[Dict[str, Any]]:
        if not self.previous_data:
            return None
        try:
            return json.loads(self.previous_data)
        except (json.JSONDecodeError, TypeError):
            return None

    def __repr__(self) -> str:
        return f"TaskHistory(task_id={self.task_id}, change_type={self.change_type})"
