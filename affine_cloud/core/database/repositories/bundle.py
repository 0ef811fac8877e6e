"""
Repository bundle.

Groups every repository bound to one ``AsyncSession`` so services can be
constructed from a single request-scoped session.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .features import UserFeatureRepository
from .sessions import SessionRepository
from .subscriptions import SubscriptionRepository
from .tokens import VerificationTokenRepository
from .users import UserRepository
from .workspaces import WorkspaceRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    users: UserRepository
    sessions: SessionRepository
    tokens: VerificationTokenRepository
    features: UserFeatureRepository
    subscriptions: SubscriptionRepository
    workspaces: WorkspaceRepository


def build_repos(session: AsyncSession) -> RepoBundle:
    """Build a ``RepoBundle`` sharing ``session``.

    Args:
        session: Request-scoped async session

    Returns:
        Bundle containing all repository instances
    """
    return RepoBundle(
        users=UserRepository(session),
        sessions=SessionRepository(session),
        tokens=VerificationTokenRepository(session),
        features=UserFeatureRepository(session),
        subscriptions=SubscriptionRepository(session),
        workspaces=WorkspaceRepository(session),
    )
