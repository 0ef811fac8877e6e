"""
Workspace repository.

Covers workspaces, member permissions, published pages and doc snapshots.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from affine_cloud.core.models.domain.enums import Permission, PublishMode

from ..base import utc_now
from ..entities.workspaces import Snapshot, Workspace, WorkspacePage, WorkspaceUserPermission
from .base import AsyncBaseRepository


class WorkspaceRepository(AsyncBaseRepository[Workspace]):
    """Repository for workspaces and the rows hanging off them."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Workspace)

    # permissions

    async def get_permission(self, workspace_id: str, user_id: str) -> Optional[WorkspaceUserPermission]:
        stmt = select(WorkspaceUserPermission).where(
            (WorkspaceUserPermission.workspace_id == workspace_id) & (WorkspaceUserPermission.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def grant(
        self, workspace_id: str, user_id: str, permission: Permission, accepted: bool = True
    ) -> WorkspaceUserPermission:
        """Give ``user_id`` a permission level in a workspace, replacing any previous level."""
        record = await self.get_permission(workspace_id, user_id)
        if record is None:
            record = WorkspaceUserPermission(workspace_id=workspace_id, user_id=user_id, type=int(permission))
        record.type = int(permission)
        record.accepted = accepted
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def list_permissions(self, workspace_id: str) -> List[WorkspaceUserPermission]:
        stmt = select(WorkspaceUserPermission).where(WorkspaceUserPermission.workspace_id == workspace_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # pages

    async def get_page(self, workspace_id: str, page_id: str) -> Optional[WorkspacePage]:
        return await self.session.get(WorkspacePage, (workspace_id, page_id))

    async def upsert_page(
        self, workspace_id: str, page_id: str, public: bool, mode: PublishMode = PublishMode.PAGE
    ) -> WorkspacePage:
        page = await self.get_page(workspace_id, page_id)
        if page is None:
            page = WorkspacePage(workspace_id=workspace_id, page_id=page_id)
        page.public = public
        page.mode = mode
        self.session.add(page)
        await self.session.commit()
        await self.session.refresh(page)
        return page

    async def count_public_pages(self, workspace_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(WorkspacePage)
            .where((WorkspacePage.workspace_id == workspace_id) & (WorkspacePage.public == True))  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    # snapshots

    async def get_snapshot(self, workspace_id: str, doc_id: str) -> Optional[Snapshot]:
        return await self.session.get(Snapshot, (workspace_id, doc_id))

    async def upsert_snapshot(self, workspace_id: str, doc_id: str, blob: bytes) -> Snapshot:
        snapshot = await self.get_snapshot(workspace_id, doc_id)
        if snapshot is None:
            snapshot = Snapshot(workspace_id=workspace_id, id=doc_id, blob=blob)
        else:
            snapshot.blob = blob
            snapshot.updated_at = utc_now()
        self.session.add(snapshot)
        await self.session.commit()
        await self.session.refresh(snapshot)
        return snapshot
