"""
API endpoints for focus sessions.

A focus session is a timed block of concentrated work, optionally spent on
one task. Listing returns a page of sessions plus totals and a per-day
breakdown of the last week.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, status

from adhd_todo.core.database.base import to_naive_utc, utc_now
from adhd_todo.core.database.entities import FocusSession
from adhd_todo.core.database.repositories import FocusSessionRepository, TaskRepository
from adhd_todo.core.errors import NotFoundError
from adhd_todo.core.models.io.focus_sessions import (
    DailyFocusStat,
    FocusSessionCreate,
    FocusSessionEnvelope,
    FocusSessionList,
    FocusSessionPatch,
    FocusSessionRead,
    FocusSessionReplace,
    FocusStats,
)
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["focus-sessions"])

STATS_DAYS = 7


async def _get_owned(repo: FocusSessionRepository, focus_session_id: str, user_id: str, refresh: bool = False):
    focus_session = await repo.get_for_user(focus_session_id, user_id, refresh=refresh)
    if focus_session is None:
        raise NotFoundError("Focus session")
    return focus_session


async def _get_task(session, task_id: Optional[str], user_id: str):
    if not task_id:
        return None
    task = await TaskRepository(session).get_for_user(task_id, user_id)
    if task is None:
        raise NotFoundError("Task")
    return task


@router.post(
    "",
    response_model=FocusSessionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Record Focus Session",
    description="Record a session that just ended. It is stored as ending now and starting `duration` minutes ago.",
    responses={
        201: {"description": "Session recorded"},
        404: {"description": "Task not found"},
    },
)
async def create_focus_session(
    data: FocusSessionCreate, session: SessionDep, user: CurrentUserDep
) -> FocusSessionEnvelope:
    """
    Record a focus session.

    - **duration**: Minutes spent.
    - **type**: Session kind, e.g. ``pomodoro`` or ``deep-work``.
    - **task_id**: Optional task the session was spent on.
    - **ambient_sound** / **brainwave_type**: Stored in the session metadata.
    - **notes**: Free text.
    """
    task = await _get_task(session, data.task_id, user.id)
    end_time = utc_now()
    focus_session = FocusSession(
        start_time=end_time - timedelta(minutes=data.duration),
        end_time=end_time,
        duration=data.duration,
        type=data.type,
        notes=data.notes,
        user_id=user.id,
        task_id=task.id if task else None,
        task=task,
    )
    focus_session.set_metadata(
        {
            key: value
            for key, value in {"ambient_sound": data.ambient_sound, "brainwave_type": data.brainwave_type}.items()
            if value is not None
        }
    )
    await FocusSessionRepository(session).create(focus_session)
    await session.commit()
    return FocusSessionEnvelope(focus_session=FocusSessionRead.from_entity(focus_session))


@router.get(
    "",
    response_model=FocusSessionList,
    summary="List Focus Sessions",
    description="Page through sessions, newest first, with total minutes and daily stats for the last 7 days.",
)
async def list_focus_sessions(
    session: SessionDep,
    user: CurrentUserDep,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    start_date: Optional[datetime] = Query(default=None, description="Sessions starting at or after"),
    end_date: Optional[datetime] = Query(default=None, description="Sessions starting at or before"),
    type: Optional[str] = Query(default=None, description="Session type"),
    task_id: Optional[str] = Query(default=None),
    include_task: bool = Query(default=True, description="Embed the task each session was spent on"),
) -> FocusSessionList:
    """
    List focus sessions.

    ``total`` and ``stats.total_duration`` cover every session matching the
    filters, not just the returned page.
    """
    repo = FocusSessionRepository(session)
    page, total, total_duration = await repo.search(
        user.id,
        limit=limit,
        offset=offset,
        start_date=to_naive_utc(start_date),
        end_date=to_naive_utc(end_date),
        session_type=type,
        task_id=task_id,
    )
    since = (utc_now() - timedelta(days=STATS_DAYS - 1)).replace(hour=0, minute=0, second=0, microsecond=0)
    daily = await repo.daily_stats(user.id, since)
    return FocusSessionList(
        focus_sessions=[FocusSessionRead.from_entity(fs, include_task=include_task) for fs in page],
        total=total,
        stats=FocusStats(
            total_duration=total_duration,
            daily_stats=[
                DailyFocusStat(date=day, total_duration=minutes, session_count=count) for day, minutes, count in daily
            ],
        ),
    )


@router.get(
    "/{focus_session_id}",
    response_model=FocusSessionEnvelope,
    summary="Get Focus Session",
    responses={404: {"description": "Focus session not found"}},
)
async def get_focus_session(focus_session_id: str, session: SessionDep, user: CurrentUserDep) -> FocusSessionEnvelope:
    focus_session = await _get_owned(FocusSessionRepository(session), focus_session_id, user.id)
    return FocusSessionEnvelope(focus_session=FocusSessionRead.from_entity(focus_session))


async def _save(session, repo: FocusSessionRepository, focus_session: FocusSession, changes: Dict[str, Any], user_id):
    if "task_id" in changes:
        task = await _get_task(session, changes["task_id"], user_id)
        focus_session.task = task
    for field, value in changes.items():
        setattr(focus_session, field, value)
    await repo.update(focus_session)
    await session.commit()
    return FocusSessionEnvelope(focus_session=FocusSessionRead.from_entity(focus_session))


@router.put(
    "/{focus_session_id}",
    response_model=FocusSessionEnvelope,
    summary="Replace Focus Session",
    description="Replace every field of a session; `start_time` is required.",
    responses={404: {"description": "Focus session or task not found"}},
)
async def replace_focus_session(
    focus_session_id: str, data: FocusSessionReplace, session: SessionDep, user: CurrentUserDep
) -> FocusSessionEnvelope:
    repo = FocusSessionRepository(session)
    focus_session = await _get_owned(repo, focus_session_id, user.id)
    changes = data.model_dump(exclude={"metadata"})
    focus_session.set_metadata(data.metadata)
    return await _save(session, repo, focus_session, changes, user.id)


@router.patch(
    "/{focus_session_id}",
    response_model=FocusSessionEnvelope,
    summary="Update Focus Session",
    description="Update the given fields. Metadata keys are merged into the existing metadata.",
    responses={404: {"description": "Focus session or task not found"}},
)
async def patch_focus_session(
    focus_session_id: str, data: FocusSessionPatch, session: SessionDep, user: CurrentUserDep
) -> FocusSessionEnvelope:
    repo = FocusSessionRepository(session)
    focus_session = await _get_owned(repo, focus_session_id, user.id)
    changes = data.model_dump(exclude_unset=True, exclude={"metadata"})
    for field in ("start_time", "duration", "type"):
        if field in changes and changes[field] is None:
            del changes[field]
    if data.metadata is not None:
        focus_session.set_metadata({**focus_session.get_metadata(), **data.metadata})
    return await _save(session, repo, focus_session, changes, user.id)


@router.delete(
    "/{focus_session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Focus Session",
    responses={404: {"description": "Focus session not found"}},
)
async def delete_focus_session(focus_session_id: str, session: SessionDep, user: CurrentUserDep) -> None:
    repo = FocusSessionRepository(session)
    focus_session = await _get_owned(repo, focus_session_id, user.id)
    await repo.delete(focus_session)
    await session.commit()
