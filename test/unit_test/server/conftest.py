from __future__ import annotations

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test database URL before importing app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh test database engine with all tables."""
    from affine_cloud.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession):
    from affine_cloud.core.database.repositories import build_repos

    return build_repos(session)


@pytest.fixture
def mailer() -> MagicMock:
    """Mail service stub; every send is accepted."""
    from affine_cloud.server.services.mail import MailResult, MailService

    mail = MagicMock(spec=MailService)
    mail.send_sign_in_mail = AsyncMock(side_effect=lambda url, email: MailResult(accepted=[email]))
    mail.send_sign_up_mail = AsyncMock(side_effect=lambda url, email: MailResult(accepted=[email]))
    return mail


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, mailer: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from affine_cloud.core.database import get_session
    from affine_cloud.server.main import app
    from affine_cloud.server.services.mail import get_mail_service

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_mail_service] = lambda: mailer

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("affine_cloud.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def u1(repos):
    """User ``u1@affine.pro`` with password ``1``."""
    from affine_cloud.server.services.users import UserService

    return await UserService(repos).create_user("u1@affine.pro", name="u1", password="1")



@pytest_asyncio.fixture
async def u1_headers(repos, u1, mailer) -> dict:
    """Request headers of a browser session with ``u1`` signed in."""
    from affine_cloud.server.services.auth import AuthService

    user_session = await AuthService(repos, mailer).create_user_session(u1)
    return {"cookie": f"sid={user_session.session_id}"}
