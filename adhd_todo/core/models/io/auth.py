"""
Authentication I/O models.

E-mail and password rules are checked by the auth service so that failures
come back as 400 with a readable message rather than a 422 validation dump.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    """Public view of a user. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    created_at: datetime


class SignupRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: str = ""
    password: str = ""


class SignupResponse(BaseModel):
    user: UserRead
    message: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    user: UserRead


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str
