"""User repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import AsyncBaseRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by (lower-cased) email.

        Args:
            email: Email address, matched case-insensitively

        Returns:
            User instance or None
        """
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_with_password_by_email(self, email: str) -> Optional[User]:
        """Get a user by email only when it has a password set."""
        user = await self.get_by_email(email)
        if user is None or not user.password:
            return None
        return user
