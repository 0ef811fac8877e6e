"""
Doc service.

Stores doc snapshots and the publish state of pages. Snapshots are opaque
binaries; merging updates belongs to the sync server.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from affine_cloud.core.database.entities.workspaces import Workspace, WorkspacePage
from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.errors import AccessDenied, DocNotFound, WorkspaceNotFound
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import Permission, PublishMode

from .permissions import PermissionService

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocContent:
    """Binary doc snapshot plus its publish mode when it is a published page."""

    blob: bytes
    publish_mode: Optional[PublishMode] = None


class DocService:
    def __init__(self, repos: RepoBundle, permissions: Optional[PermissionService] = None):
        self.repos = repos
        self.permissions = permissions or PermissionService(repos)

    async def get_doc(self, workspace_id: str, doc_id: str, user_id: Optional[str]) -> DocContent:
        """
        Read a doc snapshot on behalf of ``user_id`` (None for anonymous readers).

        Raises:
            AccessDenied: when the doc is neither readable nor public
            DocNotFound: when no snapshot is stored
        """
        if not await self.permissions.is_public_accessible(workspace_id, doc_id, user_id):
            raise AccessDenied()

        snapshot = await self.repos.workspaces.get_snapshot(workspace_id, doc_id)
        if snapshot is None:
            raise DocNotFound()

        page = await self.repos.workspaces.get_page(workspace_id, doc_id)
        mode = page.mode if page is not None and page.public else None
        return DocContent(blob=snapshot.blob, publish_mode=mode)

    async def create_workspace(self, user_id: str, root_blob: Optional[bytes] = None) -> Workspace:
        """Create a workspace owned by ``user_id``, optionally seeding its root doc."""
        workspace = await self.repos.workspaces.create(Workspace())
        await self.repos.workspaces.grant(workspace.id, user_id, Permission.OWNER, accepted=True)
        if root_blob:
            await self.repos.workspaces.upsert_snapshot(workspace.id, workspace.id, root_blob)
        logger.info(f"Created workspace {workspace.id} for user {user_id}")
        return workspace

    async def put_doc(self, workspace_id: str, doc_id: str, blob: bytes, user_id: str) -> None:
        await self._require(workspace_id, user_id, Permission.WRITE)
        await self.repos.workspaces.upsert_snapshot(workspace_id, doc_id, blob)

    async def publish_page(
        self, workspace_id: str, page_id: str, user_id: str, mode: PublishMode = PublishMode.PAGE
    ) -> WorkspacePage:
        await self._require(workspace_id, user_id, Permission.ADMIN)
        page = await self.repos.workspaces.upsert_page(workspace_id, page_id, public=True, mode=mode)
        logger.info(f"Published page {page_id} of workspace {workspace_id} as {mode.value}")
        return page

    async def revoke_page(self, workspace_id: str, page_id: str, user_id: str) -> WorkspacePage:
        await self._require(workspace_id, user_id, Permission.ADMIN)
        existing = await self.repos.workspaces.get_page(workspace_id, page_id)
        mode = existing.mode if existing is not None else PublishMode.PAGE
        return await self.repos.workspaces.upsert_page(workspace_id, page_id, public=False, mode=mode)

    async def _require(self, workspace_id: str, user_id: str, at_least: Permission) -> None:
        if await self.repos.workspaces.get_by_id(workspace_id) is None:
            raise WorkspaceNotFound()
        if not await self.permissions.try_check_workspace(workspace_id, user_id, at_least):
            raise AccessDenied()
