"""
Raw fetch provider.

Thin wrapper around ``httpx.AsyncClient`` bound to one server. Non-2xx
answers and transport failures surface as ``UserFriendlyError`` so callers
can branch on the error name.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from affine_cloud.core.errors import UserFriendlyError
from affine_cloud.core.logging_config import get_logger

from .config import client_settings

logger = get_logger(__name__)


class RawFetchProvider:
    """Send requests to one server."""

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            base_url: Server base URL; request paths are resolved against it
            transport: Custom transport, e.g. ``httpx.ASGITransport(app=...)``
            headers: Headers sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            headers=headers,
            timeout=timeout if timeout is not None else client_settings.request_timeout,
        )

    async def fetch(self, path: str, method: str = "GET", **kwargs: Any) -> httpx.Response:
        """
        Send a request and return the successful response.

        Args:
            path: Path relative to the base URL
            method: HTTP method
            **kwargs: Passed to ``httpx.AsyncClient.request``

        Raises:
            UserFriendlyError: for non-2xx answers and transport failures
        """
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = UserFriendlyError.from_any_error(exc)
            logger.debug(f"{method} {path} failed: {error!r}")
            raise error from exc
        return response

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RawFetchProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
