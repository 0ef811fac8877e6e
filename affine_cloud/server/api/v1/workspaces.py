"""
Workspace and Doc Endpoints.

Create workspaces, store doc snapshots and publish pages. Reading a doc is
open to anonymous users when the doc is shared; the response then carries
the page's publish mode in the ``publish-mode`` header.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Request, Response, status

from affine_cloud.core.constant import PUBLISH_MODE_HEADER
from affine_cloud.core.models.domain.enums import Permission
from affine_cloud.core.models.io import PublishPageRequest, WorkspacePageRead, WorkspaceRead
from affine_cloud.server.services.deps import CurrentUserDep, DocServiceDep, OptionalUserDep

router = APIRouter(tags=["workspaces"])


@router.post(
    "",
    response_model=WorkspaceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Workspace",
    description="Create a workspace owned by the signed-in user. A non-empty raw body becomes the root doc snapshot.",
    responses={401: {"description": "Not signed in"}},
)
async def create_workspace(request: Request, user: CurrentUserDep, docs: DocServiceDep) -> WorkspaceRead:
    root_blob = await request.body()
    workspace = await docs.create_workspace(user.id, root_blob or None)
    return WorkspaceRead(
        id=workspace.id, public=workspace.public, created_at=workspace.created_at, permission=Permission.OWNER
    )


@router.get(
    "/{workspace_id}/docs/{doc_id}",
    response_class=Response,
    summary="Get Doc",
    description="Download the binary snapshot of a doc the caller can read, or of a shared doc.",
    responses={
        200: {"content": {"application/octet-stream": {}}, "description": "Doc snapshot"},
        403: {"description": "Doc is neither readable nor shared"},
        404: {"description": "Doc has no snapshot"},
    },
)
async def get_doc(workspace_id: str, doc_id: str, user: OptionalUserDep, docs: DocServiceDep) -> Response:
    content = await docs.get_doc(workspace_id, doc_id, user.id if user is not None else None)
    headers = {}
    if content.publish_mode is not None:
        headers[PUBLISH_MODE_HEADER] = content.publish_mode.value
    return Response(content=content.blob, media_type="application/octet-stream", headers=headers)


@router.put(
    "/{workspace_id}/docs/{doc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Put Doc",
    description="Store the raw request body as the doc snapshot. Requires write permission.",
    responses={
        401: {"description": "Not signed in"},
        403: {"description": "No write permission"},
        404: {"description": "Workspace not found"},
    },
)
async def put_doc(
    workspace_id: str, doc_id: str, request: Request, user: CurrentUserDep, docs: DocServiceDep
) -> Response:
    await docs.put_doc(workspace_id, doc_id, await request.body(), user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{workspace_id}/docs/{doc_id}/publish",
    response_model=WorkspacePageRead,
    summary="Publish Page",
    description="Share a page publicly in page or edgeless mode. Requires admin permission.",
    responses={
        401: {"description": "Not signed in"},
        403: {"description": "No admin permission"},
        404: {"description": "Workspace not found"},
    },
)
async def publish_page(
    workspace_id: str,
    doc_id: str,
    user: CurrentUserDep,
    docs: DocServiceDep,
    payload: Optional[PublishPageRequest] = Body(default=None),
) -> WorkspacePageRead:
    request = payload or PublishPageRequest()
    page = await docs.publish_page(workspace_id, doc_id, user.id, request.mode)
    return WorkspacePageRead.model_validate(page)


@router.delete(
    "/{workspace_id}/docs/{doc_id}/publish",
    response_model=WorkspacePageRead,
    summary="Revoke Published Page",
    description="Stop sharing a page. Requires admin permission.",
    responses={
        401: {"description": "Not signed in"},
        403: {"description": "No admin permission"},
        404: {"description": "Workspace not found"},
    },
)
async def revoke_page(workspace_id: str, doc_id: str, user: CurrentUserDep, docs: DocServiceDep) -> WorkspacePageRead:
    page = await docs.revoke_page(workspace_id, doc_id, user.id)
    return WorkspacePageRead.model_validate(page)
