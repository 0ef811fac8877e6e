"""Enumerations shared by entities, I/O schemas and the client."""

from __future__ import annotations

from enum import Enum, IntEnum


class TokenType(str, Enum):
    """Purpose of a single-use verification token."""

    SIGN_IN = "sign_in"
    VERIFY_EMAIL = "verify_email"


class FeatureType(str, Enum):
    """Per-user features."""

    EARLY_ACCESS = "early_access"
    UNLIMITED_WORKSPACE = "unlimited_workspace"
    UNLIMITED_COPILOT = "unlimited_copilot"


class ServerFeature(str, Enum):
    """Features a server advertises in its config."""

    PAYMENT = "payment"
    COPILOT = "copilot"


class SubscriptionPlan(str, Enum):
    FREE = "free"
    PRO = "pro"
    TEAM = "team"
    ENTERPRISE = "enterprise"
    AI = "ai"


class SubscriptionRecurring(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    TRIALING = "trialing"
    PAUSED = "paused"


class PublishMode(str, Enum):
    """How a published page opens for readers."""

    PAGE = "page"
    EDGELESS = "edgeless"


class Permission(IntEnum):
    """Workspace permission levels, ordered by power."""

    READ = 0
    WRITE = 1
    ADMIN = 10
    OWNER = 99
