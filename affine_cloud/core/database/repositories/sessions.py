"""
Browser/user session repository.

Handles the two-level session model: a ``BrowserSession`` row per ``sid``
cookie and one ``UserSession`` row per user signed in within it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.users import BrowserSession, UserSession
from .base import AsyncBaseRepository


class SessionRepository(AsyncBaseRepository[BrowserSession]):
    """Repository for browser sessions and the user sessions they hold."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BrowserSession)

    async def create_session(self) -> BrowserSession:
        return await self.create(BrowserSession())

    async def get_session(self, session_id: str) -> Optional[BrowserSession]:
        return await self.get_by_id(session_id)

    async def get_user_sessions(self, session_id: str, include_expired: bool = False) -> List[UserSession]:
        """List user sessions of a browser session, most recent first.

        Args:
            session_id: Browser session id
            include_expired: Whether expired user sessions are returned too

        Returns:
            List of UserSession instances
        """
        stmt = (
            select(UserSession)
            .where(UserSession.session_id == session_id)
            .order_by(UserSession.created_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        user_sessions = list(result.scalars().all())
        if include_expired:
            return user_sessions
        now = utc_now()
        return [s for s in user_sessions if not s.is_expired(now)]

    async def get_user_session(self, session_id: str, user_id: str) -> Optional[UserSession]:
        stmt = select(UserSession).where(
            (UserSession.session_id == session_id) & (UserSession.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_user_session(
        self, session_id: str, user_id: str, expires_at: Optional[datetime]
    ) -> UserSession:
        """Sign ``user_id`` into the browser session, extending an existing entry."""
        user_session = await self.get_user_session(session_id, user_id)
        if user_session is None:
            user_session = UserSession(session_id=session_id, user_id=user_id, expires_at=expires_at)
        else:
            user_session.expires_at = expires_at
            user_session.created_at = utc_now()
        self.session.add(user_session)
        await self.session.commit()
        await self.session.refresh(user_session)
        return user_session

    async def refresh_user_session(self, user_session: UserSession, ttl_seconds: int) -> UserSession:
        user_session.expires_at = utc_now() + timedelta(seconds=ttl_seconds)
        self.session.add(user_session)
        await self.session.commit()
        await self.session.refresh(user_session)
        return user_session

    async def delete_user_session(self, session_id: str, user_id: str) -> bool:
        user_session = await self.get_user_session(session_id, user_id)
        if user_session is None:
            return False
        await self.session.delete(user_session)
        await self.session.commit()
        return True

    async def delete_session(self, session_id: str) -> bool:
        """Delete a browser session and every user session it holds."""
        await self.session.execute(delete(UserSession).where(UserSession.session_id == session_id))
        browser_session = await self.get_session(session_id)
        if browser_session is not None:
            await self.session.delete(browser_session)
        await self.session.commit()
        return browser_session is not None
