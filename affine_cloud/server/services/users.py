"""
User service.

Owns user creation and lookup. Emails are validated and stored lower-cased;
passwords are only ever stored hashed.
"""

from __future__ import annotations

from typing import Optional

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.database.entities.users import User
from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.errors import EmailAlreadyUsed, InvalidEmail
from affine_cloud.core.logging_config import get_logger
from affine_cloud.server.core.security import hash_password, is_valid_email

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    """Trim, lower-case and validate an email address.

    Raises:
        InvalidEmail: if the address is empty or malformed
    """
    normalized = (email or "").strip().lower()
    if not is_valid_email(normalized):
        raise InvalidEmail()
    return normalized


class UserService:
    """Service for user accounts."""

    def __init__(self, repos: RepoBundle):
        self.repos = repos

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.repos.users.get_by_id(user_id)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        return await self.repos.users.get_by_email(normalize_email(email))

    async def find_user_with_hashed_password_by_email(self, email: str) -> Optional[User]:
        return await self.repos.users.get_with_password_by_email(normalize_email(email))

    async def create_user(
        self,
        email: str,
        name: Optional[str] = None,
        password: Optional[str] = None,
        email_verified: bool = False,
    ) -> User:
        """
        Create a registered user.

        Args:
            email: Email address; must not be taken yet
            name: Display name, defaults to the local part of the email
            password: Plain text password to hash, or None for passwordless users
            email_verified: Whether to mark the email verified right away

        Returns:
            The persisted user

        Raises:
            InvalidEmail: for malformed addresses
            EmailAlreadyUsed: when a user with that email exists
        """
        normalized = normalize_email(email)
        if await self.repos.users.get_by_email(normalized) is not None:
            raise EmailAlreadyUsed()

        user = User(
            name=name or normalized.split("@", 1)[0],
            email=normalized,
            password=hash_password(password) if password else None,
            email_verified_at=utc_now() if email_verified else None,
        )
        user = await self.repos.users.create(user)
        logger.info(f"Created user {user.id}")
        return user

    async def fulfill_user(self, email: str, name: Optional[str] = None) -> User:
        """Get or create the user owning ``email`` after it proved control of the address.

        Existing users become registered and verified; unknown emails get a new
        verified account.
        """
        normalized = normalize_email(email)
        user = await self.repos.users.get_by_email(normalized)
        if user is None:
            return await self.create_user(normalized, name=name, email_verified=True)

        changed = False
        if not user.registered:
            user.registered = True
            changed = True
        if user.email_verified_at is None:
            user.email_verified_at = utc_now()
            changed = True
        if changed:
            user = await self.repos.users.update(user)
        return user
