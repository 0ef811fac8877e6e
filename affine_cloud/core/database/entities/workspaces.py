"""
Workspace, permission, published page and doc snapshot entities.

The root doc of a workspace is the snapshot whose id equals the workspace id.
"""

from __future__ import annotations

from pydantic import NaiveDatetime
from sqlalchemy import Column, DateTime, LargeBinary
from sqlmodel import Field

from affine_cloud.core.models.domain.enums import PublishMode

from ..base import Base, new_id, utc_now


class Workspace(Base, table=True):
    """Table: workspaces"""

    __tablename__ = "workspaces"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    public: bool = Field(default=False)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)


class WorkspaceUserPermission(Base, table=True):
    """Membership of a user in a workspace.

    ``type`` holds a ``Permission`` value.

    Table: workspace_user_permissions
    """

    __tablename__ = "workspace_user_permissions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    workspace_id: str = Field(foreign_key="workspaces.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    type: int = Field(description="Permission level")
    accepted: bool = Field(default=False)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)


class WorkspacePage(Base, table=True):
    """Sharing state of a page.

    Table: workspace_pages
    """

    __tablename__ = "workspace_pages"
    __table_args__ = ({"extend_existing": True},)

    workspace_id: str = Field(foreign_key="workspaces.id", primary_key=True, max_length=64)
    page_id: str = Field(primary_key=True, max_length=64)
    public: bool = Field(default=False)
    mode: PublishMode = Field(default=PublishMode.PAGE)


class Snapshot(Base, table=True):
    """Latest binary state of a doc.

    Table: snapshots
    """

    __tablename__ = "snapshots"
    __table_args__ = ({"extend_existing": True},)

    workspace_id: str = Field(foreign_key="workspaces.id", primary_key=True, max_length=64)
    id: str = Field(primary_key=True, max_length=64)
    blob: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: NaiveDatetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime
    )
