"""
Unit tests for the server registry.

Servers are backed by ``httpx.MockTransport`` so the config cache can be
observed through the requests actually sent.
"""

import asyncio

import httpx
import pytest

from affine_cloud.client import Server, ServersService
from affine_cloud.client.config import client_settings
from affine_cloud.core.errors import InternalServerError
from affine_cloud.core.models.domain.enums import ServerFeature


@pytest.fixture
def config_transport(recording_transport, server_config):
    return recording_transport(lambda request: httpx.Response(200, json=server_config(["payment"])))


class TestServerConfig:
    async def test_config_is_cached(self, server_url, config_transport):
        server = Server("AFFiNE", server_url, transport=config_transport)
        assert server.config is None

        first = await server.load_config()
        second = await server.load_config()

        assert first is second
        assert server.config is first
        assert config_transport.paths() == ["GET /api/server-config"]

    async def test_concurrent_loads_share_one_request(self, server_url, config_transport):
        server = Server("AFFiNE", server_url, transport=config_transport)

        configs = await asyncio.gather(*(server.load_config() for _ in range(5)))

        assert all(config is configs[0] for config in configs)
        assert len(config_transport.requests) == 1

    async def test_refresh(self, server_url, recording_transport, server_config):
        versions = iter(["0.14.0", "0.15.0"])
        transport = recording_transport(
            lambda request: httpx.Response(200, json=server_config(version=next(versions)))
        )
        server = Server("AFFiNE", server_url, transport=transport)

        await server.load_config()
        refreshed = await server.load_config(refresh=True)

        assert refreshed.version == "0.15.0"
        assert server.config.version == "0.15.0"

    async def test_failure_is_not_cached(self, server_url, recording_transport, server_config):
        responses = iter([httpx.Response(500, json={"detail": "boom"}), httpx.Response(200, json=server_config())])
        transport = recording_transport(lambda request: next(responses))
        server = Server("AFFiNE", server_url, transport=transport)

        with pytest.raises(InternalServerError):
            await server.load_config()
        assert server.config is None

        assert (await server.load_config()).version == "0.14.0"
        assert len(transport.requests) == 2

    async def test_subscribe(self, server_url, config_transport):
        server = Server("AFFiNE", server_url, transport=config_transport)
        seen = []
        unsubscribe = server.subscribe(seen.append)

        await server.load_config()
        await server.load_config()
        unsubscribe()
        unsubscribe()
        await server.load_config(refresh=True)

        assert len(seen) == 1

    async def test_features_and_policy(self, server_url, config_transport):
        server = Server("AFFiNE", server_url, transport=config_transport)
        assert server.features == []
        assert server.auth_policy is None
        assert server.password_limits is None

        await server.load_config()

        assert server.has_feature(ServerFeature.PAYMENT)
        assert not server.has_feature(ServerFeature.COPILOT)
        assert server.auth_policy.early_access_preview is False
        assert server.password_limits.min_length == 8
        assert server.password_limits.max_length == 32


class TestServersService:
    def test_default_server(self):
        service = ServersService()

        assert service.index == 0
        assert service.current.name == "AFFiNE"
        assert service.current.address == client_settings.server_url.rstrip("/")

    def test_add_and_select(self, server_url):
        service = ServersService(server_url)

        index = service.add(Server("Self Hosted", "http://localhost:4000/"))

        assert index == 1
        assert service.select(index).address == "http://localhost:4000"
        assert service.current.name == "Self Hosted"

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_select_out_of_range(self, server_url, index):
        service = ServersService(server_url)

        with pytest.raises(IndexError):
            service.select(index)
        assert service.index == 0
