"""
Server registry.

A ``Server`` is an AFFiNE deployment the client talks to. Its config is
fetched lazily once and cached; ``ServersService`` keeps the list of known
servers and which one is selected.
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

import httpx

from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import ServerFeature
from affine_cloud.core.models.io import AuthPolicy, PasswordLimits, ServerConfig

from .config import client_settings
from .fetch import RawFetchProvider

logger = get_logger(__name__)

ConfigListener = Callable[[ServerConfig], None]

DEFAULT_SERVER_NAME = "AFFiNE"
SERVER_CONFIG_PATH = "/api/server-config"


class Server:
    def __init__(
        self,
        name: str,
        address: str,
        fetch: Optional[RawFetchProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.name = name
        self.address = address.rstrip("/")
        self.fetch = fetch or RawFetchProvider(self.address, transport=transport)
        self._config: Optional[ServerConfig] = None
        self._lock = asyncio.Lock()
        self._listeners: List[ConfigListener] = []

    def __repr__(self) -> str:
        return f"Server(name={self.name!r}, address={self.address!r})"

    @property
    def config(self) -> Optional[ServerConfig]:
        """Last loaded config, None until ``load_config`` succeeded."""
        return self._config

    async def load_config(self, refresh: bool = False) -> ServerConfig:
        """
        Fetch the server config.

        The first successful result is cached; concurrent callers wait for
        the in-flight request instead of sending their own. Errors propagate
        and leave the cache untouched.

        Args:
            refresh: Ignore the cache and refetch

        Returns:
            The server config
        """
        if self._config is not None and not refresh:
            return self._config
        async with self._lock:
            if self._config is not None and not refresh:
                return self._config
            response = await self.fetch.fetch(SERVER_CONFIG_PATH)
            config = ServerConfig.model_validate(response.json())
            self._config = config
        logger.debug(f"Loaded config of {self!r}: version={config.version}")
        for listener in list(self._listeners):
            listener(config)
        return config

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """Call ``listener`` with every newly loaded config; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def auth_policy(self) -> Optional[AuthPolicy]:
        return self._config.auth_policy if self._config is not None else None

    @property
    def password_limits(self) -> Optional[PasswordLimits]:
        policy = self.auth_policy
        return policy.password if policy is not None else None

    @property
    def features(self) -> List[ServerFeature]:
        return list(self._config.features) if self._config is not None else []

    def has_feature(self, feature: ServerFeature) -> bool:
        return feature in self.features


class ServersService:
    """Known servers and the selected one; starts with the default AFFiNE server."""

    def __init__(self, default_address: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        address = default_address or client_settings.server_url
        self.servers: List[Server] = [Server(DEFAULT_SERVER_NAME, address, transport=transport)]
        self.index = 0

    @property
    def current(self) -> Server:
        return self.servers[self.index]

    def select(self, index: int) -> Server:
        """Select the server at ``index``.

        Raises:
            IndexError: when no server has that index
        """
        if not 0 <= index < len(self.servers):
            raise IndexError(f"No server at index {index}")
        self.index = index
        return self.current

    def add(self, server: Server) -> int:
        """Register a server and return its index."""
        self.servers.append(server)
        return len(self.servers) - 1
