"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- auth: sign-in credential, current user and session payloads
- server_config: server config and auth policy
- subscriptions: user subscriptions
- workspaces: workspaces and published pages
"""

from .auth import CurrentUser, MagicLinkSent, SessionRead, SessionsRead, SignInCredential
from .server_config import AuthPolicy, PasswordLimits, ServerConfig
from .subscriptions import SubscriptionRead
from .workspaces import PublishPageRequest, WorkspacePageRead, WorkspaceRead

__all__ = [
    "AuthPolicy",
    "CurrentUser",
    "MagicLinkSent",
    "PasswordLimits",
    "PublishPageRequest",
    "ServerConfig",
    "SessionRead",
    "SessionsRead",
    "SignInCredential",
    "SubscriptionRead",
    "WorkspacePageRead",
    "WorkspaceRead",
]
