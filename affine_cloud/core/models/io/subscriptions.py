"""
Subscription I/O models.

``SubscriptionRead`` is shared by the REST endpoints and the client store,
which merges partial updates into cached records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..domain.enums import SubscriptionPlan, SubscriptionRecurring, SubscriptionStatus


class SubscriptionRead(BaseModel):
    """Schema for reading a user subscription from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    plan: SubscriptionPlan
    recurring: SubscriptionRecurring
    status: SubscriptionStatus
    start: datetime
    end: Optional[datetime] = None
    next_bill_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
