"""
User subscription entity.

One row per (user, plan); cancelling keeps the row and sets ``canceled_at``
so the subscription stays usable until ``end``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from affine_cloud.core.models.domain.enums import (
    SubscriptionPlan,
    SubscriptionRecurring,
    SubscriptionStatus,
)

from ..base import Base, new_id, utc_now


class UserSubscription(Base, table=True):
    """Paid plan held by a user.

    Table: user_subscriptions
    """

    __tablename__ = "user_subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "plan", name="uq_user_subscriptions_user_plan"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    plan: SubscriptionPlan = Field()
    recurring: SubscriptionRecurring = Field(default=SubscriptionRecurring.MONTHLY)
    status: SubscriptionStatus = Field(default=SubscriptionStatus.ACTIVE)
    start: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)
    end: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
    next_bill_at: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
    canceled_at: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: NaiveDatetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime
    )

    def __repr__(self) -> str:
        return f"UserSubscription(user_id={self.user_id}, plan={self.plan}, status={self.status})"
