from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SERVER_URL = "http://localhost"


@pytest_asyncio.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    """Session on a fresh in-memory database shared with the app."""
    from affine_cloud.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def repos(session: AsyncSession):
    from affine_cloud.core.database.repositories import build_repos

    return build_repos(session)


@pytest.fixture
def mailer() -> MagicMock:
    from affine_cloud.server.services.mail import MailResult, MailService

    mail = MagicMock(spec=MailService)
    mail.send_sign_in_mail = AsyncMock(side_effect=lambda url, email: MailResult(accepted=[email]))
    mail.send_sign_up_mail = AsyncMock(side_effect=lambda url, email: MailResult(accepted=[email]))
    return mail


@pytest.fixture
def server_url() -> str:
    return SERVER_URL


@pytest.fixture
def app_transport(session: AsyncSession, mailer: MagicMock):
    """ASGI transport into the server app bound to the test database."""
    from affine_cloud.core.database import get_session
    from affine_cloud.server.main import app
    from affine_cloud.server.services.mail import get_mail_service

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_mail_service] = lambda: mailer

    yield ASGITransport(app=app)

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def owner(repos):
    from affine_cloud.server.services.users import UserService

    return await UserService(repos).create_user("owner@affine.pro", name="owner", password="1")


@pytest_asyncio.fixture
async def owner_headers(repos, mailer, owner) -> dict:
    from affine_cloud.server.services.auth import AuthService

    user_session = await AuthService(repos, mailer).create_user_session(owner)
    return {"cookie": f"sid={user_session.session_id}"}
