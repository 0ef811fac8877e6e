"""
Database entities.

Importing this package registers every table with ``Base.metadata``.
"""

from .features import UserFeature
from .subscriptions import UserSubscription
from .tokens import VerificationToken
from .users import BrowserSession, User, UserSession
from .workspaces import Snapshot, Workspace, WorkspacePage, WorkspaceUserPermission

__all__ = [
    "BrowserSession",
    "Snapshot",
    "User",
    "UserFeature",
    "UserSession",
    "UserSubscription",
    "VerificationToken",
    "Workspace",
    "WorkspacePage",
    "WorkspaceUserPermission",
]
