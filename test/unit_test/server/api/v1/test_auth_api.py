"""
Unit tests for the authentication endpoints.

Covers signup validation, login by bearer token and cookie, logout and the
password reset round trip.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from adhd_todo.core.database.base import utc_now
from adhd_todo.core.database.entities import Category, UserSettings, VerificationToken
from adhd_todo.core.security import hash_token
from adhd_todo.server.core.config import settings
from adhd_todo.server.services.auth import RESET_REQUESTED_MESSAGE

SIGNUP = "/api/v1/auth/signup"
LOGIN = "/api/v1/auth/login"


class TestSignup:
    """Test POST /api/v1/auth/signup."""

    async def test_signup_creates_user(self, client: AsyncClient):
        response = await client.post(SIGNUP, json={"name": "Ada", "email": "Ada@Example.com", "password": "longenough"})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["email"] == "ada@example.com"
        assert "password_hash" not in body["user"]

    async def test_signup_creates_defaults(self, client: AsyncClient, test_engine):
        from adhd_todo.core.database import create_sessionmaker

        response = await client.post(SIGNUP, json={"email": "ada@example.com", "password": "longenough"})
        user_id = response.json()["user"]["id"]

        async with create_sessionmaker(test_engine)() as session:
            categories = (await session.execute(select(Category).where(Category.user_id == user_id))).scalars().all()
            user_settings = (
                await session.execute(select(UserSettings).where(UserSettings.user_id == user_id))
            ).scalar_one_or_none()
        assert sorted(c.name for c in categories) == ["Health", "Learning", "Personal", "Shopping", "Work"]
        assert user_settings is not None

    @pytest.mark.parametrize(
        "payload, message",
        [
            ({"email": "", "password": "longenough"}, "Email and password are required"),
            ({"email": "ada@example.com", "password": ""}, "Email and password are required"),
            ({"email": "not-an-email", "password": "longenough"}, "Invalid email format"),
            ({"email": "ada@example.com", "password": "short"}, "Password must be at least 8 characters long"),
        ],
    )
    async def test_signup_validation(self, client: AsyncClient, payload, message):
        response = await client.post(SIGNUP, json=payload)

        assert response.status_code == 400
        assert response.json() == {"detail": message}

    async def test_signup_duplicate_email(self, client: AsyncClient):
        await client.post(SIGNUP, json={"email": "ada@example.com", "password": "longenough"})
        response = await client.post(SIGNUP, json={"email": "ADA@example.com", "password": "longenough"})

        assert response.status_code == 400
        assert response.json()["detail"] == "User with this email already exists"


class TestLogin:
    """Test login, session lookup and logout."""

    async def test_login_returns_token_and_cookie(self, client: AsyncClient):
        await client.post(SIGNUP, json={"email": "ada@example.com", "password": "longenough"})
        response = await client.post(LOGIN, json={"email": "ada@example.com", "password": "longenough"})

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "ada@example.com"
        assert response.cookies.get(settings.session.cookie_name) == body["token"]

    async def test_login_wrong_password(self, client: AsyncClient):
        await client.post(SIGNUP, json={"email": "ada@example.com", "password": "longenough"})
        response = await client.post(LOGIN, json={"email": "ada@example.com", "password": "wrong-password"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post(LOGIN, json={"email": "ghost@example.com", "password": "whatever1"})
        assert response.status_code == 401

    async def test_protected_route_requires_session(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks")
        assert response.status_code == 401

    async def test_unknown_bearer_token_is_rejected(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    async def test_cookie_session_is_accepted(self, client: AsyncClient):
        await client.post(SIGNUP, json={"email": "ada@example.com", "password": "longenough"})
        await client.post(LOGIN, json={"email": "ada@example.com", "password": "longenough"})

        response = await client.get("/api/v1/tasks")
        assert response.status_code == 200

    async def test_logout_revokes_session(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/auth/logout", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get("/api/v1/tasks", headers=auth_headers)
        assert response.status_code == 401

    async def test_logout_without_session(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/logout")
        assert response.status_code == 204


class TestPasswordReset:
    """Test forgot-password and reset-password."""

    async def test_unknown_email_gets_neutral_message(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})

        assert response.status_code == 200
        assert response.json()["message"] == RESET_REQUESTED_MESSAGE

    async def test_blank_email_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/forgot-password", json={"email": "  "})

        assert response.status_code == 400
        assert response.json()["detail"] == "Email is required"

    async def test_reset_round_trip(self, client: AsyncClient, auth_headers, test_engine, monkeypatch):
        from adhd_todo.server.services import auth as auth_service

        issued = []
        original = auth_service.generate_token

        def capture_token():
            token = original()
            issued.append(token)
            return token

        monkeypatch.setattr(auth_service, "generate_token", capture_token)
        response = await client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        assert response.status_code == 200
        token = issued[-1]

        response = await client.post("/api/v1/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
        assert response.status_code == 200
        assert response.json()["message"] == "Password has been reset successfully"

        # old sessions are revoked and the token is single-use
        assert (await client.get("/api/v1/tasks", headers=auth_headers)).status_code == 401
        response = await client.post("/api/v1/auth/reset-password", json={"token": token, "password": "another-pass"})
        assert response.status_code == 400

        response = await client.post(LOGIN, json={"email": "alice@example.com", "password": "brand-new-pass"})
        assert response.status_code == 200

    async def test_expired_token_is_rejected(self, client: AsyncClient, auth_headers, test_engine):
        from adhd_todo.core.database import create_sessionmaker

        async with create_sessionmaker(test_engine)() as session:
            session.add(
                VerificationToken(
                    identifier="alice@example.com",
                    token_hash=hash_token("stale"),
                    expires_at=utc_now() - timedelta(minutes=1),
                )
            )
            await session.commit()

        response = await client.post("/api/v1/auth/reset-password", json={"token": "stale", "password": "brand-new-pass"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_short_password_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/reset-password", json={"token": "x", "password": "short"})
        assert response.status_code == 400
