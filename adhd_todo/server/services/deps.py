"""
Request Dependencies.

Database session and authenticated-user dependencies shared by the API
routers. A session token is read from the ``Authorization: Bearer`` header
first and from the session cookie otherwise.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database import get_session
from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import User
from adhd_todo.core.database.repositories import UserRepository, UserSessionRepository
from adhd_todo.core.errors import UnauthorizedError
from adhd_todo.core.security import hash_token
from adhd_todo.server.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_session_token(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)] = None,
) -> Optional[str]:
    """Raw session token sent with the request, if any."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session.cookie_name) or None


async def get_optional_user(
    session: SessionDep,
    token: Annotated[Optional[str], Depends(get_session_token)],
) -> Optional[User]:
    """User owning a valid session token, or None."""
    if not token:
        return None
    user_session = await UserSessionRepository(session).get_active(hash_token(token), utc_now())
    if user_session is None:
        return None
    return await UserRepository(session).get_by_id(user_session.user_id)


async def get_current_user(user: Annotated[Optional[User], Depends(get_optional_user)]) -> User:
    """Authenticated user; raises 401 when the session is missing, unknown or expired."""
    if user is None:
        raise UnauthorizedError()
    return user


SessionTokenDep = Annotated[Optional[str], Depends(get_session_token)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
