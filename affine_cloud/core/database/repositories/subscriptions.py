"""User subscription repository."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from affine_cloud.core.models.domain.enums import SubscriptionPlan

from ..entities.subscriptions import UserSubscription
from .base import AsyncBaseRepository


class SubscriptionRepository(AsyncBaseRepository[UserSubscription]):
    """Repository for user subscriptions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserSubscription)

    async def list_for_user(self, user_id: str) -> List[UserSubscription]:
        stmt = (
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.created_at.asc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, user_id: str, plan: SubscriptionPlan) -> Optional[UserSubscription]:
        stmt = select(UserSubscription).where(
            (UserSubscription.user_id == user_id) & (UserSubscription.plan == plan)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
