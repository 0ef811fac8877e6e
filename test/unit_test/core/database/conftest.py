"""Test configuration for database unit tests.

This module provides common fixtures for testing the centralized database
layer against an in-memory SQLite database.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from affine_cloud.core.database import create_all, create_engine, create_sessionmaker
from affine_cloud.core.database.entities import User
from affine_cloud.core.database.repositories import RepoBundle, build_repos


@pytest_asyncio.fixture
async def in_memory_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create in-memory SQLite engine with every table."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def in_memory_session(in_memory_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def repos(in_memory_session: AsyncSession) -> RepoBundle:
    return build_repos(in_memory_session)


@pytest_asyncio.fixture
async def user(repos: RepoBundle) -> User:
    return await repos.users.create(User(name="u1", email="u1@affine.pro", password="salt$hash"))
