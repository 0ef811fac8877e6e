"""
Permission service.

Answers who may read or change a workspace and its pages. Checks never
raise; callers turn a ``False`` into ``AccessDenied``.
"""

from __future__ import annotations

from typing import Optional

from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.models.domain.enums import Permission


class PermissionService:
    def __init__(self, repos: RepoBundle):
        self.repos = repos

    async def get_workspace_permission(self, workspace_id: str, user_id: Optional[str]) -> Optional[Permission]:
        """Accepted permission level of ``user_id`` in the workspace, if any."""
        if user_id is None:
            return None
        record = await self.repos.workspaces.get_permission(workspace_id, user_id)
        if record is None or not record.accepted:
            return None
        return Permission(record.type)

    async def try_check_workspace(
        self, workspace_id: str, user_id: Optional[str], at_least: Permission = Permission.READ
    ) -> bool:
        """
        Whether ``user_id`` holds at least ``at_least`` in the workspace.

        Anyone may read a public workspace.
        """
        if at_least == Permission.READ:
            workspace = await self.repos.workspaces.get_by_id(workspace_id)
            if workspace is not None and workspace.public:
                return True
        permission = await self.get_workspace_permission(workspace_id, user_id)
        return permission is not None and permission >= at_least

    async def try_check_page(
        self, workspace_id: str, page_id: str, user_id: Optional[str], at_least: Permission = Permission.READ
    ) -> bool:
        """A published page is readable by anyone; otherwise fall back to the workspace check."""
        if at_least == Permission.READ:
            page = await self.repos.workspaces.get_page(workspace_id, page_id)
            if page is not None and page.public:
                return True
        return await self.try_check_workspace(workspace_id, user_id, at_least)

    async def is_public_accessible(self, workspace_id: str, doc_id: str, user_id: Optional[str]) -> bool:
        """
        Whether the doc can be read through the share endpoint.

        The root doc (``doc_id == workspace_id``) is readable when the
        workspace is, or when at least one of its pages is published, since
        readers of a shared page need it to resolve titles and structure.
        """
        if doc_id == workspace_id:
            if await self.try_check_workspace(workspace_id, user_id):
                return True
            return await self.repos.workspaces.count_public_pages(workspace_id) > 0
        return await self.try_check_page(workspace_id, doc_id, user_id)
