"""
Subscription service.

Exposes the current user's subscriptions. Checkout and billing webhooks
live outside this server; here subscriptions are only read, canceled at
period end and resumed.
"""

from __future__ import annotations

from typing import List

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.database.entities.subscriptions import UserSubscription
from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.errors import PaymentDisabled, SubscriptionNotFound
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import SubscriptionPlan
from affine_cloud.server.core.config import settings

logger = get_logger(__name__)


class SubscriptionService:
    def __init__(self, repos: RepoBundle):
        self.repos = repos

    @staticmethod
    def ensure_enabled() -> None:
        """Raise ``PaymentDisabled`` unless the payment feature is on."""
        if not settings.payment_enabled:
            raise PaymentDisabled()

    async def list_subscriptions(self, user_id: str) -> List[UserSubscription]:
        self.ensure_enabled()
        return await self.repos.subscriptions.list_for_user(user_id)

    async def get_subscription(self, user_id: str, plan: SubscriptionPlan) -> UserSubscription:
        self.ensure_enabled()
        subscription = await self.repos.subscriptions.get_for_user(user_id, plan)
        if subscription is None:
            raise SubscriptionNotFound()
        return subscription

    async def cancel_subscription(self, user_id: str, plan: SubscriptionPlan) -> UserSubscription:
        """Cancel at period end: ``status`` stays until ``end``, ``canceled_at`` is set."""
        subscription = await self.get_subscription(user_id, plan)
        if subscription.canceled_at is None:
            subscription.canceled_at = utc_now()
            subscription = await self.repos.subscriptions.update(subscription)
            logger.info(f"Canceled {plan.value} subscription of user {user_id}")
        return subscription

    async def resume_subscription(self, user_id: str, plan: SubscriptionPlan) -> UserSubscription:
        subscription = await self.get_subscription(user_id, plan)
        if subscription.canceled_at is not None:
            subscription.canceled_at = None
            subscription = await self.repos.subscriptions.update(subscription)
            logger.info(f"Resumed {plan.value} subscription of user {user_id}")
        return subscription
