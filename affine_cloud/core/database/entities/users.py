"""
User and session entity models.

A browser session (``BrowserSession``) is identified by the ``sid`` cookie and may
hold several signed-in users, each tracked by a ``UserSession`` row with its
own expiry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class User(Base, table=True):
    """Registered (or invited) account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(description="Display name")
    email: str = Field(index=True, unique=True, max_length=255, description="Lower-cased email address")
    password: Optional[str] = Field(default=None, description="PBKDF2 salt$hash, null for passwordless users")
    avatar_url: Optional[str] = Field(default=None)
    email_verified_at: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
    registered: bool = Field(default=True, description="False for users only known through invitations")
    created_at: NaiveDatetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"


class BrowserSession(Base, table=True):
    """Browser session referenced by the session cookie.

    Table: multiple_users_sessions
    """

    __tablename__ = "multiple_users_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)


class UserSession(Base, table=True):
    """A user signed in within a browser session.

    Table: user_sessions
    """

    __tablename__ = "user_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    session_id: str = Field(foreign_key="multiple_users_sessions.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    expires_at: Optional[NaiveDatetime] = Field(
        default=None, description="Null means the session never expires", sa_type=DateTime
    )
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utc_now())

    def __repr__(self) -> str:
        return f"UserSession(session_id={self.session_id}, user_id={self.user_id})"
