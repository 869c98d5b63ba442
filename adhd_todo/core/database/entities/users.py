"""
User account entity models.

This module contains the user table plus the two token tables that hang off
it: login sessions and password reset tokens. Raw tokens are never stored;
only their SHA-256 digests are persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class User(Base, table=True):
    """Registered user.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: Optional[str] = Field(default=None, max_length=255, description="Display name")
    email: str = Field(unique=True, index=True, max_length=320, description="Login e-mail, stored lower-cased")
    password_hash: Optional[str] = Field(default=None, description="PBKDF2 hash string")
    image: Optional[str] = Field(default=None, description="Avatar URL")
    email_verified_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"


class UserSession(Base, table=True):
    """Login session addressed by the hash of its bearer token.

    Table: user_sessions
    """

    __tablename__ = "user_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class VerificationToken(Base, table=True):
    """One-time token used to reset a password.

    Table: verification_tokens
    """

    __tablename__ = "verification_tokens"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    identifier: str = Field(index=True, max_length=320, description="E-mail the token was issued for")
    token_hash: str = Field(unique=True, index=True, max_length=64)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
