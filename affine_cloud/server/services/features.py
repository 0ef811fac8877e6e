"""Feature service: early access and other per-user grants."""

from __future__ import annotations

from typing import List, Optional

from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.models.domain.enums import FeatureType
from affine_cloud.server.core.config import AuthConfig, settings


class FeatureService:
    """Looks up and grants user features."""

    def __init__(self, repos: RepoBundle, auth_config: Optional[AuthConfig] = None):
        self.repos = repos
        self.auth_config = auth_config or settings.auth

    def is_staff(self, email: str) -> bool:
        domain = email.rsplit("@", 1)[-1].lower() if "@" in email else ""
        return bool(domain) and domain in self.auth_config.staff_email_domains

    async def is_early_access_user(self, email: str) -> bool:
        """Staff are always early access users; others need the feature grant."""
        if self.is_staff(email):
            return True
        user = await self.repos.users.get_by_email(email)
        if user is None:
            return False
        return await self.repos.features.has_active_feature(user.id, FeatureType.EARLY_ACCESS)

    async def add_early_access_user(self, user_id: str) -> None:
        await self.repos.features.add_feature(user_id, FeatureType.EARLY_ACCESS, reason="Early access user")

    async def list_user_features(self, user_id: str) -> List[FeatureType]:
        return [f.feature for f in await self.repos.features.list_active(user_id)]
