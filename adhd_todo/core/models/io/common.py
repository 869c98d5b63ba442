"""Shared types for API I/O schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from adhd_todo.core.database.base import to_naive_utc

UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
"""Datetime accepted from clients and normalised to naive UTC."""

Weekday = Annotated[int, Field(ge=0, le=6)]
"""Day of week, 0 = Sunday ... 6 = Saturday."""


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class SuccessResponse(BaseModel):
    success: bool = True
