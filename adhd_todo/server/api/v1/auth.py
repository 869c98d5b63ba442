"""
Authentication endpoints.

Signup, login and logout plus the two-step password reset. Login returns a
bearer token and also sets it as an HTTP-only cookie, so browser clients
and API clients can both authenticate.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from adhd_todo.core.models.io.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    UserRead,
)
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.server.core.config import settings
from adhd_todo.server.services.auth import AuthService
from adhd_todo.server.services.deps import SessionDep, SessionTokenDep

router = APIRouter(tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign Up",
    description="Register a new account. Default settings and five starter categories are created with it.",
    response_description="The created user (without password hash).",
    responses={
        201: {"description": "User created"},
        400: {"description": "Missing fields, malformed e-mail, short password or e-mail already registered"},
    },
)
async def signup(data: SignupRequest, session: SessionDep) -> SignupResponse:
    """
    Register a new account.

    - **name**: Optional display name.
    - **email**: Login e-mail; must look like an address.
    - **password**: At least 8 characters.
    """
    user = await AuthService(session).signup(data)
    return SignupResponse(user=UserRead.model_validate(user), message="User created successfully")


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    description="Exchange e-mail and password for a session token.",
    response_description="Session token, its expiry and the user.",
    responses={
        200: {"description": "Logged in; the session cookie is set as well"},
        401: {"description": "Invalid email or password"},
    },
)
async def login(data: LoginRequest, response: Response, session: SessionDep) -> LoginResponse:
    """
    Open a login session.

    Send the returned token as ``Authorization: Bearer <token>``, or rely on
    the ``session_token`` cookie set by this response.
    """
    token, expires_at, user = await AuthService(session).login(data.email, data.password)
    response.set_cookie(
        key=settings.session.cookie_name,
        value=token,
        max_age=settings.session.ttl_hours * 3600,
        httponly=True,
        secure=settings.session.cookie_secure,
        samesite="lax",
    )
    return LoginResponse(token=token, expires_at=expires_at, user=UserRead.model_validate(user))


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Log Out",
    description="Revoke the current session and clear the session cookie.",
)
async def logout(response: Response, session: SessionDep, token: SessionTokenDep) -> None:
    await AuthService(session).logout(token)
    response.delete_cookie(settings.session.cookie_name)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request Password Reset",
    description="Issue a one-hour reset token. The response does not reveal whether the account exists.",
    responses={400: {"description": "Email is required"}},
)
async def forgot_password(data: ForgotPasswordRequest, session: SessionDep) -> MessageResponse:
    message = await AuthService(session).request_password_reset(data.email)
    return MessageResponse(message=message)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset Password",
    description="Set a new password with a reset token. The token is consumed and existing sessions are revoked.",
    responses={400: {"description": "Invalid or expired token, or password too short"}},
)
async def reset_password(data: ResetPasswordRequest, session: SessionDep) -> MessageResponse:
    """
    Complete a password reset.

    - **token**: Token from the reset link.
    - **password**: New password, at least 8 characters.
    """
    await AuthService(session).reset_password(data.token, data.password)
    return MessageResponse(message="Password has been reset successfully")
