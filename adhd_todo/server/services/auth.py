"""
Account service.

Covers signup, login sessions, password reset and the account operations
exposed under ``/user``. Passwords and tokens go through
``adhd_todo.core.security``; only hashes reach the database.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import User, UserSession, UserSettings, VerificationToken
from adhd_todo.core.database.repositories import (
    UserRepository,
    UserSessionRepository,
    VerificationTokenRepository,
)
from adhd_todo.core.errors import UnauthorizedError, ValidationFailedError
from adhd_todo.core.models.io.auth import SignupRequest
from adhd_todo.core.models.io.user import ProfileUpdate
from adhd_todo.core.security import generate_token, hash_password, hash_token, verify_password
from adhd_todo.server.core.config import settings

from .defaults import build_default_categories

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
RESET_REQUESTED_MESSAGE = "If an account with that email exists, we have sent a password reset link"


def _validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailedError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


class AuthService:
    """User accounts, sessions and password management."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.sessions = UserSessionRepository(session)
        self.tokens = VerificationTokenRepository(session)

    def _hash(self, password: str) -> str:
        return hash_password(password, settings.security.pbkdf2_iterations)

    async def signup(self, data: SignupRequest) -> User:
        """
        Register a new user with default settings and categories.

        Args:
            data: Name, e-mail and password

        Returns:
            The created user

        Raises:
            ValidationFailedError: missing fields, malformed e-mail, short password
                or an e-mail that is already registered
        """
        email = data.email.strip().lower()
        if not email or not data.password:
            raise ValidationFailedError("Email and password are required")
        if not EMAIL_PATTERN.match(email):
            raise ValidationFailedError("Invalid email format")
        _validate_password(data.password)
        if await self.users.get_by_email(email) is not None:
            raise ValidationFailedError("User with this email already exists")

        user = await self.users.create(User(name=data.name, email=email, password_hash=self._hash(data.password)))
        self.session.add(UserSettings(user_id=user.id))
        self.session.add_all(build_default_categories(user.id))
        await self.session.commit()
        logger.info(f"Created user {user.id} with default settings and categories")
        return user

    async def login(self, email: str, password: str) -> Tuple[str, datetime, User]:
        """
        Open a session for valid credentials.

        Returns:
            Tuple of (raw token, expiry, user). The raw token is only ever
            returned here; the database keeps its hash.

        Raises:
            UnauthorizedError: unknown e-mail or wrong password
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise UnauthorizedError("Invalid email or password")

        now = utc_now()
        await self.sessions.purge_expired(now)
        token = generate_token()
        expires_at = now + timedelta(hours=settings.session.ttl_hours)
        await self.sessions.create(UserSession(user_id=user.id, token_hash=hash_token(token), expires_at=expires_at))
        await self.session.commit()
        logger.info(f"User {user.id} logged in")
        return token, expires_at, user

    async def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.sessions.delete_by_token_hash(hash_token(token))
        await self.session.commit()

    async def request_password_reset(self, email: str) -> str:
        """
        Issue a reset token for an existing account.

        The response message is the same whether or not the account exists.
        The reset link is logged; delivering it is left to the operator.
        """
        if not email or not email.strip():
            raise ValidationFailedError("Email is required")
        user = await self.users.get_by_email(email)
        if user is None:
            return RESET_REQUESTED_MESSAGE

        token = generate_token()
        await self.tokens.delete_for_identifier(user.email)
        await self.tokens.create(
            VerificationToken(
                identifier=user.email,
                token_hash=hash_token(token),
                expires_at=utc_now() + timedelta(minutes=settings.security.reset_token_ttl_minutes),
            )
        )
        await self.session.commit()
        reset_url = f"{settings.base_url.rstrip('/')}/auth/reset-password?token={token}"
        logger.info(f"Password reset requested for user {user.id}: {reset_url}")
        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, token: str, password: str) -> None:
        """
        Replace a password using a reset token, consuming the token.

        Raises:
            ValidationFailedError: unknown or expired token, short password
        """
        _validate_password(password)
        reset_token = await self.tokens.get_valid(hash_token(token), utc_now())
        if reset_token is None:
            raise ValidationFailedError("Invalid or expired token")
        user = await self.users.get_by_email(reset_token.identifier)
        if user is None:
            raise ValidationFailedError("Invalid or expired token")

        user.password_hash = self._hash(password)
        await self.users.update(user)
        await self.tokens.delete_for_identifier(reset_token.identifier)
        await self.sessions.delete_for_user(user.id)
        await self.session.commit()
        logger.info(f"Password reset for user {user.id}")

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise ValidationFailedError("Current password is incorrect")
        _validate_password(new_password)
        user.password_hash = self._hash(new_password)
        await self.users.update(user)
        await self.session.commit()
        logger.info(f"Password changed for user {user.id}")

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """Update name, e-mail and avatar. A new e-mail must not belong to another account."""
        changes = data.model_dump(exclude_unset=True)
        if changes.get("email") is not None:
            email = changes["email"].strip().lower()
            if not EMAIL_PATTERN.match(email):
                raise ValidationFailedError("Invalid email format")
            if email != user.email:
                existing = await self.users.get_by_email(email)
                if existing is not None and existing.id != user.id:
                    raise ValidationFailedError("Email is already in use")
            changes["email"] = email
        elif "email" in changes:
            del changes["email"]

        for field, value in changes.items():
            setattr(user, field, value)
        await self.users.update(user)
        await self.session.commit()
        return user

    async def delete_account(self, user: User) -> None:
        """Delete a user; owned rows go with it through ON DELETE CASCADE."""
        await self.users.delete(user)
        await self.session.commit()
        logger.info(f"Deleted account {user.id}")
