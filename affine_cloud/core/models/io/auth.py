"""
Authentication I/O models for API requests and responses.

These schemas define the contract of the ``/api/auth`` endpoints: the
sign-in credential posted by clients and the user/session payloads returned
to them.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignInCredential(BaseModel):
    """Body of ``POST /api/auth/sign-in``.

    Without ``password`` the server emails a magic link instead of signing in.
    """

    email: str = Field(description="Email address to sign in with")
    password: Optional[str] = Field(default=None, description="Password; omit to receive a magic link")


class CurrentUser(BaseModel):
    """Public view of a signed-in user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    email_verified: bool = False
    has_password: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "CurrentUser":
        """Build from a ``User`` entity without exposing the password hash."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar_url=user.avatar_url,
            email_verified=user.email_verified_at is not None,
            has_password=bool(user.password),
            created_at=user.created_at,
        )


class MagicLinkSent(BaseModel):
    """Response of a passwordless sign-in request."""

    email: str


class SessionRead(BaseModel):
    """Response of ``GET /api/auth/session``."""

    user: Optional[CurrentUser] = None


class SessionsRead(BaseModel):
    """Response of ``GET /api/auth/sessions``."""

    users: List[CurrentUser] = Field(default_factory=list)
