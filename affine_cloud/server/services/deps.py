"""
Service Dependencies.

FastAPI dependency providers wiring request-scoped services onto the
database session, plus the session-cookie based user resolution used by
every authenticated endpoint.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from affine_cloud.core.database import get_session
from affine_cloud.core.database.repositories import RepoBundle, build_repos
from affine_cloud.core.errors import AuthenticationRequired
from affine_cloud.core.models.io import CurrentUser
from affine_cloud.server.core.config import settings
from affine_cloud.server.core.constant import AUTH_USER_HEADER
from affine_cloud.server.services.auth import AuthService
from affine_cloud.server.services.docs import DocService
from affine_cloud.server.services.mail import MailService, get_mail_service
from affine_cloud.server.services.permissions import PermissionService
from affine_cloud.server.services.subscriptions import SubscriptionService
from affine_cloud.server.services.tokens import TokenService
from affine_cloud.server.services.users import UserService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_repos(session: SessionDep) -> RepoBundle:
    return build_repos(session)


ReposDep = Annotated[RepoBundle, Depends(get_repos)]
MailDep = Annotated[MailService, Depends(get_mail_service)]


def get_user_service(repos: ReposDep) -> UserService:
    return UserService(repos)


def get_auth_service(repos: ReposDep, mail: MailDep) -> AuthService:
    return AuthService(repos, mail)


def get_token_service(repos: ReposDep) -> TokenService:
    return TokenService(repos)


def get_subscription_service(repos: ReposDep) -> SubscriptionService:
    return SubscriptionService(repos)


def get_permission_service(repos: ReposDep) -> PermissionService:
    return PermissionService(repos)


def get_doc_service(repos: ReposDep) -> DocService:
    return DocService(repos)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]
DocServiceDep = Annotated[DocService, Depends(get_doc_service)]


def extract_session_id(request: Request) -> Optional[str]:
    """
    Read the browser session id of a request.

    The ``sid`` cookie wins; clients without cookies send
    ``Authorization: Bearer <sid>``.
    """
    session_id = request.cookies.get(settings.session_cookie)
    if session_id:
        return session_id
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def extract_user_id(request: Request) -> Optional[str]:
    """User selected through the ``x-auth-user`` header in multi-account sessions."""
    return request.headers.get(AUTH_USER_HEADER) or None


async def get_optional_user(request: Request, auth: AuthServiceDep) -> Optional[CurrentUser]:
    session_id = extract_session_id(request)
    if not session_id:
        return None
    return await auth.get_user(session_id, extract_user_id(request))


async def get_current_user(user: Annotated[Optional[CurrentUser], Depends(get_optional_user)]) -> CurrentUser:
    """Resolve the signed-in user or raise ``AuthenticationRequired``."""
    if user is None:
        raise AuthenticationRequired()
    return user


OptionalUserDep = Annotated[Optional[CurrentUser], Depends(get_optional_user)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
