"""User feature entity (early access and similar grants)."""

from __future__ import annotations

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field

from affine_cloud.core.models.domain.enums import FeatureType

from ..base import Base, new_id, utc_now


class UserFeature(Base, table=True):
    """Feature granted to a user.

    Table: user_features
    """

    __tablename__ = "user_features"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    feature: FeatureType = Field(index=True)
    reason: str = Field(default="", description="Why the feature was granted")
    activated: bool = Field(default=True)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)
