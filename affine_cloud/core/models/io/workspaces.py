"""Workspace and published page I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import Permission, PublishMode


class WorkspaceRead(BaseModel):
    """Schema for reading a workspace from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    public: bool
    created_at: datetime
    permission: Optional[Permission] = Field(default=None, description="Permission of the caller")


class PublishPageRequest(BaseModel):
    """Body of ``POST /api/workspaces/{workspace_id}/docs/{doc_id}/publish``."""

    mode: PublishMode = Field(default=PublishMode.PAGE, description="How readers open the page")


class WorkspacePageRead(BaseModel):
    """Sharing state of a page."""

    model_config = ConfigDict(from_attributes=True)

    workspace_id: str
    page_id: str
    public: bool
    mode: PublishMode
