"""Initial schema for AFFiNE Cloud

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates the tables of the server:
- users, browser sessions and per-user sessions
- verification tokens and user features
- user subscriptions
- workspaces, workspace permissions, published pages and doc snapshots

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum types store member names, matching the ORM mapping.
token_type = sa.Enum("SIGN_IN", "VERIFY_EMAIL", name="tokentype")
feature_type = sa.Enum("EARLY_ACCESS", "UNLIMITED_WORKSPACE", "UNLIMITED_COPILOT", name="featuretype")
subscription_plan = sa.Enum("FREE", "PRO", "TEAM", "ENTERPRISE", "AI", name="subscriptionplan")
subscription_recurring = sa.Enum("MONTHLY", "YEARLY", "LIFETIME", name="subscriptionrecurring")
subscription_status = sa.Enum(
    "ACTIVE",
    "PAST_DUE",
    "UNPAID",
    "CANCELED",
    "INCOMPLETE",
    "INCOMPLETE_EXPIRED",
    "TRIALING",
    "PAUSED",
    name="subscriptionstatus",
)
publish_mode = sa.Enum("PAGE", "EDGELESS", name="publishmode")


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("email_verified_at", sa.DateTime(), nullable=True),
        sa.Column("registered", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_created_at", "created_at"),
    )

    # Create multiple_users_sessions table (one row per sid cookie)
    op.create_table(
        "multiple_users_sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create user_sessions table
    op.create_table(
        "user_sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("session_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["multiple_users_sessions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_user_sessions_session_id", "session_id"),
        sa.Index("ix_user_sessions_user_id", "user_id"),
    )

    # Create verification_tokens table
    op.create_table(
        "verification_tokens",
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("type", token_type, nullable=False),
        sa.Column("credential", sa.String(255), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("token", "type"),
    )

    # Create user_features table
    op.create_table(
        "user_features",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("feature", feature_type, nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("activated", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_user_features_user_id", "user_id"),
        sa.Index("ix_user_features_feature", "feature"),
    )

    # Create user_subscriptions table
    op.create_table(
        "user_subscriptions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("plan", subscription_plan, nullable=False),
        sa.Column("recurring", subscription_recurring, nullable=False),
        sa.Column("status", subscription_status, nullable=False),
        sa.Column("start", sa.DateTime(), nullable=False),
        sa.Column("end", sa.DateTime(), nullable=True),
        sa.Column("next_bill_at", sa.DateTime(), nullable=True),
        sa.Column("canceled_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "plan", name="uq_user_subscriptions_user_plan"),
        sa.Index("ix_user_subscriptions_user_id", "user_id"),
    )

    # Create workspaces table
    op.create_table(
        "workspaces",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create workspace_user_permissions table
    op.create_table(
        "workspace_user_permissions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("type", sa.Integer(), nullable=False),
        sa.Column("accepted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_workspace_user_permissions_workspace_id", "workspace_id"),
        sa.Index("ix_workspace_user_permissions_user_id", "user_id"),
    )

    # Create workspace_pages table
    op.create_table(
        "workspace_pages",
        sa.Column("workspace_id", sa.String(64), nullable=False),
        sa.Column("page_id", sa.String(64), nullable=False),
        sa.Column("public", sa.Boolean(), nullable=False),
        sa.Column("mode", publish_mode, nullable=False),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"]),
        sa.PrimaryKeyConstraint("workspace_id", "page_id"),
    )

    # Create snapshots table
    op.create_table(
        "snapshots",
        sa.Column("workspace_id", sa.String(64), nullable=False),
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("blob", sa.LargeBinary(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"]),
        sa.PrimaryKeyConstraint("workspace_id", "id"),
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("snapshots")
    op.drop_table("workspace_pages")
    op.drop_table("workspace_user_permissions")
    op.drop_table("workspaces")
    op.drop_table("user_subscriptions")
    op.drop_table("user_features")
    op.drop_table("verification_tokens")
    op.drop_table("user_sessions")
    op.drop_table("multiple_users_sessions")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        publish_mode,
        subscription_status,
        subscription_recurring,
        subscription_plan,
        feature_type,
        token_type,
    ):
        enum_type.drop(bind, checkfirst=True)
