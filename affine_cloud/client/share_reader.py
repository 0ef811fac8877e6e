"""Share reader: downloads a shared doc together with its workspace root doc."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from affine_cloud.core.constant import PUBLISH_MODE_HEADER
from affine_cloud.core.errors import ErrorNames, UserFriendlyError, is_backend_error
from affine_cloud.core.models.domain.enums import PublishMode

from .fetch import RawFetchProvider


@dataclass(frozen=True)
class ShareSnapshot:
    doc: bytes
    workspace: bytes
    publish_mode: Optional[PublishMode] = None


class ShareReaderStore:
    def __init__(self, fetch: Optional[RawFetchProvider] = None) -> None:
        self.fetch = fetch

    async def load_share(self, workspace_id: str, doc_id: str) -> Optional[ShareSnapshot]:
        """
        Load a shared doc.

        Returns:
            The doc and root doc binaries, or None when the server denies access

        Raises:
            RuntimeError: when the store has no fetch provider
            UserFriendlyError: for every failure other than access denied
        """
        if self.fetch is None:
            raise RuntimeError("No Fetch Service")
        try:
            doc_response = await self.fetch.fetch(f"/api/workspaces/{workspace_id}/docs/{doc_id}")
            mode = doc_response.headers.get(PUBLISH_MODE_HEADER)
            workspace_response = await self.fetch.fetch(f"/api/workspaces/{workspace_id}/docs/{workspace_id}")
        except Exception as error:
            if is_backend_error(error) and UserFriendlyError.from_any_error(error).name == ErrorNames.ACCESS_DENIED:
                return None
            raise

        return ShareSnapshot(
            doc=doc_response.content,
            workspace=workspace_response.content,
            publish_mode=PublishMode(mode) if mode in {m.value for m in PublishMode} else None,
        )
