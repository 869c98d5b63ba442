"""
Base database models and utilities.

This module provides the foundational database components used across
all entities using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def new_id() -> str:
    """Generate an opaque string primary key."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Get current UTC datetime as naive datetime.

    All timestamps are persisted naive in UTC so SQLite and Postgres compare
    them the same way.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
