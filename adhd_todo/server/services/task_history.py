"""
Task history recording.

Every task write appends a ``TaskHistory`` row in the same transaction as the
change itself. ``change_data`` only lists fields whose value actually changed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from pydantic_core import to_jsonable_python
from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database.entities import Task, TaskHistory
from adhd_todo.core.models.domain.enums import ChangeType

logger = logging.getLogger(__name__)

TRACKED_FIELDS = (
    "title",
    "description",
    "priority",
    "emotion",
    "due_date",
    "completed_at",
    "estimated_duration",
    "actual_duration",
    "goal_id",
    "parent_id",
)


def snapshot(task: Task) -> Dict[str, Any]:
    """Tracked fields plus category ids, for diffing before and after a write."""
    data = {field: getattr(task, field) for field in TRACKED_FIELDS}
    data["category_ids"] = sorted(category.id for category in task.categories)
    return data


def extract_task_changes(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """New values of the fields that differ between two snapshots."""
    return {field: value for field, value in after.items() if before.get(field) != value}


def _dumps(data: Dict[str, Any]) -> str:
    return json.dumps(to_jsonable_python(data))


def change_type_for(before: Dict[str, Any], changes: Dict[str, Any]) -> ChangeType:
    """COMPLETED when ``completed_at`` goes from unset to set, UPDATED otherwise."""
    if before.get("completed_at") is None and changes.get("completed_at") is not None:
        return ChangeType.completed
    return ChangeType.updated


def record(
    session: AsyncSession,
    task_id: str,
    user_id: str,
    change_type: ChangeType,
    change_data: Dict[str, Any],
    previous_data: Optional[Dict[str, Any]] = None,
) -> TaskHistory:
    """Add a history entry to the session. The caller flushes and commits."""
    entry = TaskHistory(
        task_id=task_id,
        user_id=user_id,
        change_type=change_type,
        change_data=_dumps(change_data),
        previous_data=_dumps(previous_data) if previous_data is not None else None,
    )
    session.add(entry)
    logger.debug(f"Recorded {change_type.value} for task {task_id}")
    return entry
