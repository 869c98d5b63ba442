from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel.pool import StaticPool

from adhd_todo.core.database import create_all, create_engine, create_sessionmaker

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session for tests that call services and repositories directly."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(test_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with mocked lifespan; every request gets its own session."""
    from adhd_todo.core.database import get_session
    from adhd_todo.server.main import app

    test_session_maker = create_sessionmaker(test_engine)

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("adhd_todo.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


async def signup_and_login(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> Dict[str, str]:
    """Create an account and return the Authorization header of a fresh session."""
    response = await client.post("/api/v1/auth/signup", json={"name": "Tester", "email": email, "password": password})
    assert response.status_code == 201, response.text
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # Keep requests bearer-only so one client can act as several users
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture(name="auth_headers")
async def auth_headers_fixture(client: AsyncClient) -> Dict[str, str]:
    return await signup_and_login(client, "alice@example.com")


@pytest_asyncio.fixture(name="auth_client")
async def auth_client_fixture(client: AsyncClient, auth_headers: Dict[str, str]) -> AsyncClient:
    """Client logged in as alice@example.com."""
    client.headers.update(auth_headers)
    return client


@pytest_asyncio.fixture(name="login_as")
async def login_as_fixture(client: AsyncClient):
    """Factory returning auth headers for a newly registered user."""

    async def _login_as(email: str, password: str = TEST_PASSWORD) -> Dict[str, str]:
        return await signup_and_login(client, email, password)

    return _login_as
