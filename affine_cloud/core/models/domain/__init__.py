"""Domain enumerations."""

from .enums import (
    FeatureType,
    Permission,
    PublishMode,
    ServerFeature,
    SubscriptionPlan,
    SubscriptionRecurring,
    SubscriptionStatus,
    TokenType,
)

__all__ = [
    "FeatureType",
    "Permission",
    "PublishMode",
    "ServerFeature",
    "SubscriptionPlan",
    "SubscriptionRecurring",
    "SubscriptionStatus",
    "TokenType",
]
