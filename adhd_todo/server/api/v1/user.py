"""
API endpoints for the current user.

Preferences (``/settings``), an activity summary built from task history,
and account management: password change, profile update and deletion.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from typing import Any, Dict

from fastapi import APIRouter, Query, status

from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import UserSettings
from adhd_todo.core.database.entities.user_settings import DEFAULT_AI_ASSISTANT, DEFAULT_FOCUS_MODE
from adhd_todo.core.database.repositories import TaskHistoryRepository, TaskRepository, UserSettingsRepository
from adhd_todo.core.errors import ValidationFailedError
from adhd_todo.core.models.domain.enums import ChangeType
from adhd_todo.core.models.io.auth import UserRead
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.core.models.io.tasks import TaskHistoryRead
from adhd_todo.core.models.io.user import (
    ActivityResponse,
    ActivitySummary,
    ChangePasswordRequest,
    ProfileUpdate,
    SettingsEnvelope,
    TaskStats,
    UserSettingsRead,
    UserSettingsUpdate,
)
from adhd_todo.server.services.auth import AuthService
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["user"])

RECENT_ACTIVITY = 10
MAX_ACTIVITY_DAYS = 90
NESTED_SETTINGS = {"focus_mode", "ai_assistant"}


def to_settings_read(row: UserSettings) -> UserSettingsRead:
    return UserSettingsRead(
        theme=row.theme,
        timezone=row.timezone,
        week_starts_on=row.week_starts_on,
        hour_format=row.hour_format,
        enable_notifications=row.enable_notifications,
        notification_sound=row.notification_sound,
        notification_volume=row.notification_volume,
        focus_mode=row.get_focus_mode(),
        ai_assistant=row.get_ai_assistant(),
        language=row.language,
        date_format=row.date_format,
    )


async def _store_settings(session, user_id: str, data: UserSettingsUpdate, merge: bool) -> SettingsEnvelope:
    """Upsert settings. With ``merge`` nested groups are merged key by key into the stored values."""
    row = await UserSettingsRepository(session).get_or_create(user_id)
    changes: Dict[str, Any] = data.model_dump(mode="json", exclude_unset=True, exclude=NESTED_SETTINGS)
    for field, value in changes.items():
        if value is not None:
            setattr(row, field, value)

    if data.focus_mode is not None:
        base = row.get_focus_mode() if merge else DEFAULT_FOCUS_MODE
        row.set_focus_mode({**base, **data.focus_mode.model_dump(exclude_unset=True, exclude_none=True)})
    if data.ai_assistant is not None:
        base = row.get_ai_assistant() if merge else DEFAULT_AI_ASSISTANT
        row.set_ai_assistant({**base, **data.ai_assistant.model_dump(exclude_unset=True, exclude_none=True)})

    await UserSettingsRepository(session).update(row)
    await session.commit()
    return SettingsEnvelope(settings=to_settings_read(row))


@router.get(
    "/settings",
    response_model=SettingsEnvelope,
    summary="Get Settings",
    description="Get the user's preferences, or the defaults when none are stored yet.",
)
async def get_settings(session: SessionDep, user: CurrentUserDep) -> SettingsEnvelope:
    row = await UserSettingsRepository(session).get_for_user(user.id)
    return SettingsEnvelope(settings=to_settings_read(row) if row else UserSettingsRead())


@router.put(
    "/settings",
    response_model=SettingsEnvelope,
    summary="Save Settings",
    description="Store the given preferences. A nested group that is sent replaces the stored one.",
)
async def put_settings(data: UserSettingsUpdate, session: SessionDep, user: CurrentUserDep) -> SettingsEnvelope:
    """
    Save preferences.

    - **theme**: light, dark or system.
    - **week_starts_on**: 0 = Sunday ... 6 = Saturday.
    - **hour_format**: "12" or "24".
    - **focus_mode**: Timer durations, auto-start flags and sound.
    - **ai_assistant**: Default model and whether to suggest AI help.
    """
    return await _store_settings(session, user.id, data, merge=False)


@router.patch(
    "/settings",
    response_model=SettingsEnvelope,
    summary="Update Settings",
    description="Store the given preferences, merging nested groups key by key.",
)
async def patch_settings(data: UserSettingsUpdate, session: SessionDep, user: CurrentUserDep) -> SettingsEnvelope:
    return await _store_settings(session, user.id, data, merge=True)


@router.get(
    "/activity",
    response_model=ActivityResponse,
    summary="Get Activity",
    description="Summarise task history over the last `days` days and report task counters.",
    responses={400: {"description": "days outside 1..90"}},
)
async def get_activity(
    session: SessionDep,
    user: CurrentUserDep,
    days: int = Query(default=7, description="Window in days, 1 to 90"),
) -> ActivityResponse:
    """
    Activity summary.

    ``summary_by_day`` maps each ``YYYY-MM-DD`` to change counts per type;
    ``recent_activity`` holds the ten newest entries in the window.
    """
    if not 1 <= days <= MAX_ACTIVITY_DAYS:
        raise ValidationFailedError("Invalid days parameter. Must be a number between 1 and 90.")

    now = utc_now()
    entries = await TaskHistoryRepository(session).list_for_user_since(user.id, now - timedelta(days=days))
    by_day: Dict[str, Dict[ChangeType, int]] = defaultdict(lambda: defaultdict(int))
    for entry in entries:
        by_day[entry.created_at.strftime("%Y-%m-%d")][entry.change_type] += 1

    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    counts = await TaskRepository(session).stats_for_user(user.id, now, day_start, day_start + timedelta(days=1))
    total, completed = counts["total"], counts["completed"]
    return ActivityResponse(
        activity=ActivitySummary(
            total_changes=len(entries),
            summary_by_day={day: dict(per_type) for day, per_type in by_day.items()},
            recent_activity=[TaskHistoryRead.from_entity(entry) for entry in entries[:RECENT_ACTIVITY]],
        ),
        stats=TaskStats(
            total_tasks=total,
            completed_tasks=completed,
            overdue_tasks=counts["overdue"],
            tasks_due_today=counts["due_today"],
            completion_rate=round(completed / total * 100) if total else 0,
        ),
        period_days=days,
        generated_at=now,
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    responses={400: {"description": "Current password is incorrect"}},
)
async def change_password(data: ChangePasswordRequest, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    await AuthService(session).change_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully")


@router.patch(
    "/profile",
    response_model=UserRead,
    summary="Update Profile",
    description="Change name, e-mail or avatar.",
    responses={400: {"description": "Email is already in use"}},
)
async def update_profile(data: ProfileUpdate, session: SessionDep, user: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(await AuthService(session).update_profile(user, data))


@router.delete(
    "/account",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Account",
    description="Delete the user and everything they own.",
)
async def delete_account(session: SessionDep, user: CurrentUserDep) -> None:
    await AuthService(session).delete_account(user)
