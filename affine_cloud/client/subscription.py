"""
Subscription store.

Caches the current user's subscriptions fetched from the server and lets
callers apply local updates (e.g. after a cancel) without refetching.
Everything is a no-op while the server does not advertise the payment
feature.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import TypeAdapter

from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import ServerFeature, SubscriptionPlan
from affine_cloud.core.models.io import SubscriptionRead

from .servers import Server

logger = get_logger(__name__)

SubscriptionUpdate = Union[SubscriptionRead, Dict[str, Any]]

_subscription_list = TypeAdapter(List[SubscriptionRead])


class SubscriptionStore:
    def __init__(self, server: Server) -> None:
        self.server = server
        self._subscriptions: Optional[List[SubscriptionRead]] = None

    @property
    def subscriptions(self) -> Optional[List[SubscriptionRead]]:
        """Cached subscriptions, None before the first load."""
        return self._subscriptions

    async def has_payment_feature(self) -> bool:
        config = await self.server.load_config()
        return ServerFeature.PAYMENT in config.features

    async def revalidate(self) -> List[SubscriptionRead]:
        """Refetch the subscriptions and replace the cache."""
        if not await self.has_payment_feature():
            self._subscriptions = None
            return []
        response = await self.server.fetch.fetch("/api/subscriptions")
        self._subscriptions = _subscription_list.validate_python(response.json())
        return list(self._subscriptions)

    async def get(self, plan: SubscriptionPlan = SubscriptionPlan.PRO) -> Optional[SubscriptionRead]:
        """
        Cached subscription to ``plan``.

        Returns None without sending any request when the server has no
        payment feature.
        """
        if not await self.has_payment_feature():
            return None
        if self._subscriptions is None:
            await self.revalidate()
        return next((s for s in self._subscriptions or [] if s.plan == plan), None)

    def mutate(self, plan: SubscriptionPlan, update: Optional[SubscriptionUpdate] = None) -> None:
        """
        Merge ``update`` into the first cached subscription to ``plan``.

        Nothing happens when there is no update, nothing is cached or no
        subscription to ``plan`` is cached.

        Raises:
            ValidationError: when the merged record is not a valid subscription
        """
        if not update or not self._subscriptions:
            return
        fields = update.model_dump() if isinstance(update, SubscriptionRead) else dict(update)
        for i, subscription in enumerate(self._subscriptions):
            if subscription.plan == plan:
                self._subscriptions[i] = SubscriptionRead.model_validate({**subscription.model_dump(), **fields})
                return

    async def cancel(self, plan: SubscriptionPlan = SubscriptionPlan.PRO) -> SubscriptionRead:
        response = await self.server.fetch.fetch(f"/api/subscriptions/{plan.value}/cancel", method="POST")
        record = SubscriptionRead.model_validate(response.json())
        self.mutate(plan, record)
        return record

    async def resume(self, plan: SubscriptionPlan = SubscriptionPlan.PRO) -> SubscriptionRead:
        response = await self.server.fetch.fetch(f"/api/subscriptions/{plan.value}/resume", method="POST")
        record = SubscriptionRead.model_validate(response.json())
        self.mutate(plan, record)
        return record
