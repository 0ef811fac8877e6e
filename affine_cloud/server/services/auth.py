"""
Authentication service.

Signs users in and out and manages multi-account browser sessions: one
``sid`` cookie names a browser session that can hold several signed-in users,
each with their own expiry.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from fastapi import Response

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.database.entities.users import BrowserSession, User, UserSession
from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.errors import WrongSignInCredentials
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.io import CurrentUser
from affine_cloud.core.monitoring import log_auth_event
from affine_cloud.server.core.config import AuthConfig, settings
from affine_cloud.server.core.security import verify_password

from .features import FeatureService
from .mail import MailResult, MailService
from .users import UserService

logger = get_logger(__name__)


class AuthService:
    """Service for sign-in, sign-out and session resolution."""

    def __init__(
        self,
        repos: RepoBundle,
        mail: MailService,
        users: Optional[UserService] = None,
        features: Optional[FeatureService] = None,
        auth_config: Optional[AuthConfig] = None,
    ):
        self.repos = repos
        self.mail = mail
        self.config = auth_config or settings.auth
        self.users = users or UserService(repos)
        self.features = features or FeatureService(repos, self.config)

    # ------------------------------------------------------------------
    # credentials
    # ------------------------------------------------------------------

    async def sign_up(self, name: str, email: str, password: str) -> CurrentUser:
        """Register a new user with a password.

        Raises:
            EmailAlreadyUsed: when the email is taken
        """
        user = await self.users.create_user(email, name=name, password=password)
        log_auth_event("sign_up", user_id=user.id, email=user.email)
        return CurrentUser.from_user(user)

    async def sign_in(self, email: str, password: str) -> CurrentUser:
        """
        Check an email/password pair.

        Raises:
            WrongSignInCredentials: unknown user, passwordless user or wrong password
        """
        user = await self.users.find_user_with_hashed_password_by_email(email)
        if user is None or not verify_password(password, user.password or ""):
            raise WrongSignInCredentials()
        log_auth_event("sign_in", user_id=user.id, email=user.email)
        return CurrentUser.from_user(user)

    async def can_sign_in(self, email: str) -> bool:
        """Whether ``email`` may sign in, by password or magic link.

        Everyone may, unless the server runs an early access preview.
        """
        if not self.config.early_access_preview:
            return True
        return await self.features.is_early_access_user(email)

    async def send_sign_in_email(self, email: str, link: str, sign_up: bool) -> MailResult:
        if sign_up:
            return await self.mail.send_sign_up_mail(link, email)
        return await self.mail.send_sign_in_mail(link, email)

    # ------------------------------------------------------------------
    # sessions
    # ------------------------------------------------------------------

    async def create_user_session(
        self, user: User | CurrentUser, existing_session_id: Optional[str] = None, ttl: Optional[int] = None
    ) -> UserSession:
        """
        Sign ``user`` into a browser session.

        Args:
            user: User to sign in
            existing_session_id: Current ``sid``; the user joins that session when it exists
            ttl: Session lifetime in seconds, defaults to the configured TTL

        Returns:
            The user session; its ``session_id`` is the value for the cookie
        """
        browser_session: Optional[BrowserSession] = None
        if existing_session_id:
            browser_session = await self.repos.sessions.get_session(existing_session_id)
        if browser_session is None:
            browser_session = await self.repos.sessions.create_session()

        ttl = ttl if ttl is not None else self.config.session_ttl_seconds
        return await self.repos.sessions.upsert_user_session(
            browser_session.id, user.id, utc_now() + timedelta(seconds=ttl)
        )

    async def get_user_session(self, session_id: str, user_id: Optional[str] = None) -> Optional[UserSession]:
        """The selected live user session: ``user_id``'s, or the most recently signed-in one."""
        user_sessions = await self.repos.sessions.get_user_sessions(session_id)
        if not user_sessions:
            return None
        if user_id is None:
            return user_sessions[0]
        return next((s for s in user_sessions if s.user_id == user_id), None)

    async def get_user(self, session_id: str, user_id: Optional[str] = None) -> Optional[CurrentUser]:
        user_session = await self.get_user_session(session_id, user_id)
        if user_session is None:
            return None
        user = await self.users.get_user(user_session.user_id)
        return CurrentUser.from_user(user) if user is not None else None

    async def get_user_list(self, session_id: str) -> List[CurrentUser]:
        """All users signed in within the browser session, most recent first."""
        users = []
        for user_session in await self.repos.sessions.get_user_sessions(session_id):
            user = await self.users.get_user(user_session.user_id)
            if user is not None:
                users.append(CurrentUser.from_user(user))
        return users

    async def refresh_user_session_if_needed(self, user_session: UserSession, ttr: Optional[int] = None) -> bool:
        """
        Extend a session whose remaining lifetime dropped below ``ttr``.

        Returns:
            True when the session was refreshed
        """
        if user_session.expires_at is None:
            return False
        ttr = ttr if ttr is not None else self.config.session_ttr_seconds
        if user_session.expires_at - utc_now() > timedelta(seconds=ttr):
            return False
        await self.repos.sessions.refresh_user_session(user_session, self.config.session_ttl_seconds)
        logger.debug(f"Refreshed session {user_session.session_id} for user {user_session.user_id}")
        return True

    async def sign_out(self, session_id: str, user_id: Optional[str] = None) -> Optional[BrowserSession]:
        """
        Sign one user (or everyone) out of a browser session.

        Returns:
            The browser session when users remain in it, otherwise None after
            deleting it
        """
        if user_id is not None:
            await self.repos.sessions.delete_user_session(session_id, user_id)
            if await self.repos.sessions.get_user_sessions(session_id):
                log_auth_event("sign_out", user_id=user_id)
                return await self.repos.sessions.get_session(session_id)

        await self.repos.sessions.delete_session(session_id)
        log_auth_event("sign_out", user_id=user_id)
        return None

    # ------------------------------------------------------------------
    # cookies
    # ------------------------------------------------------------------

    def set_cookie(self, response: Response, session_id: str) -> None:
        response.set_cookie(
            key=self.config.session_cookie,
            value=session_id,
            max_age=self.config.session_ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=settings.external_url.startswith("https://"),
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(key=self.config.session_cookie, httponly=True, samesite="lax")
