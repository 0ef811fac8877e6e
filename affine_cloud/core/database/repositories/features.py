"""User feature repository."""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from affine_cloud.core.models.domain.enums import FeatureType

from ..entities.features import UserFeature
from .base import AsyncBaseRepository


class UserFeatureRepository(AsyncBaseRepository[UserFeature]):
    """Repository for per-user feature grants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserFeature)

    async def list_active(self, user_id: str) -> List[UserFeature]:
        stmt = select(UserFeature).where((UserFeature.user_id == user_id) & (UserFeature.activated == True))  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_active_feature(self, user_id: str, feature: FeatureType) -> bool:
        return any(f.feature == feature for f in await self.list_active(user_id))

    async def add_feature(self, user_id: str, feature: FeatureType, reason: str = "") -> UserFeature:
        """Grant ``feature`` to a user; an existing active grant is returned unchanged."""
        for existing in await self.list_active(user_id):
            if existing.feature == feature:
                return existing
        return await self.create(UserFeature(user_id=user_id, feature=feature, reason=reason))
