"""
Subscription Endpoints.

Read, cancel and resume the signed-in user's subscriptions. Every route
answers 404 ``PAYMENT_DISABLED`` while the payment feature is off.
"""

from __future__ import annotations

from fastapi import APIRouter

from affine_cloud.core.models.domain.enums import SubscriptionPlan
from affine_cloud.core.models.io import SubscriptionRead
from affine_cloud.server.services.deps import CurrentUserDep, SubscriptionServiceDep

router = APIRouter(tags=["subscriptions"])

_COMMON_RESPONSES = {
    401: {"description": "Not signed in"},
    404: {"description": "Payment disabled or subscription not found"},
}


@router.get(
    "",
    response_model=list[SubscriptionRead],
    summary="List Subscriptions",
    description="List the subscriptions of the signed-in user.",
    responses=_COMMON_RESPONSES,
)
async def list_subscriptions(user: CurrentUserDep, service: SubscriptionServiceDep) -> list[SubscriptionRead]:
    subscriptions = await service.list_subscriptions(user.id)
    return [SubscriptionRead.model_validate(s) for s in subscriptions]


@router.get(
    "/{plan}",
    response_model=SubscriptionRead,
    summary="Get Subscription",
    description="Get the signed-in user's subscription to one plan.",
    responses=_COMMON_RESPONSES,
)
async def get_subscription(
    plan: SubscriptionPlan, user: CurrentUserDep, service: SubscriptionServiceDep
) -> SubscriptionRead:
    return SubscriptionRead.model_validate(await service.get_subscription(user.id, plan))


@router.post(
    "/{plan}/cancel",
    response_model=SubscriptionRead,
    summary="Cancel Subscription",
    description="Cancel a subscription at the end of its current period.",
    responses=_COMMON_RESPONSES,
)
async def cancel_subscription(
    plan: SubscriptionPlan, user: CurrentUserDep, service: SubscriptionServiceDep
) -> SubscriptionRead:
    return SubscriptionRead.model_validate(await service.cancel_subscription(user.id, plan))


@router.post(
    "/{plan}/resume",
    response_model=SubscriptionRead,
    summary="Resume Subscription",
    description="Undo a pending cancellation.",
    responses=_COMMON_RESPONSES,
)
async def resume_subscription(
    plan: SubscriptionPlan, user: CurrentUserDep, service: SubscriptionServiceDep
) -> SubscriptionRead:
    return SubscriptionRead.model_validate(await service.resume_subscription(user.id, plan))
