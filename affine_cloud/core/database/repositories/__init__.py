"""
Repositories.

Data access objects for the centralized database layer, one per table group.
"""

from .base import AsyncBaseRepository, QueryBuilder
from .bundle import RepoBundle, build_repos
from .features import UserFeatureRepository
from .sessions import SessionRepository
from .subscriptions import SubscriptionRepository
from .tokens import VerificationTokenRepository
from .users import UserRepository
from .workspaces import WorkspaceRepository

__all__ = [
    "AsyncBaseRepository",
    "QueryBuilder",
    "RepoBundle",
    "SessionRepository",
    "SubscriptionRepository",
    "UserFeatureRepository",
    "UserRepository",
    "VerificationTokenRepository",
    "WorkspaceRepository",
    "build_repos",
]
