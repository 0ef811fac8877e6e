"""Unit tests for the client subscription store."""

import json

import httpx
import pytest
from pydantic import ValidationError

from affine_cloud.client import Server, SubscriptionStore
from affine_cloud.core.errors import SubscriptionNotFound
from affine_cloud.core.models.domain.enums import SubscriptionPlan, SubscriptionRecurring, SubscriptionStatus


def store_for(server_url, transport) -> SubscriptionStore:
    return SubscriptionStore(Server("AFFiNE", server_url, transport=transport))


@pytest.fixture
def payment_server(recording_transport, server_config, subscription_record):
    """Server with the payment feature holding a pro and an ai subscription."""
    records = [subscription_record("pro"), subscription_record("ai", recurring="yearly")]

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/server-config":
            return httpx.Response(200, json=server_config(["payment"]))
        if path == "/api/subscriptions":
            return httpx.Response(200, json=records)
        if path == "/api/subscriptions/pro/cancel":
            return httpx.Response(200, json=subscription_record("pro", canceled_at="2026-01-15T00:00:00"))
        if path == "/api/subscriptions/pro/resume":
            return httpx.Response(200, json=subscription_record("pro"))
        return httpx.Response(404, json=SubscriptionNotFound().to_json())

    return recording_transport(handler)


class TestWithoutPaymentFeature:
    async def test_get_sends_no_subscription_request(self, server_url, recording_transport, server_config):
        transport = recording_transport(lambda request: httpx.Response(200, json=server_config()))
        store = store_for(server_url, transport)

        assert await store.get() is None
        assert await store.revalidate() == []
        assert store.subscriptions is None
        assert transport.paths() == ["GET /api/server-config"]


class TestSubscriptionStore:
    async def test_get_loads_once(self, server_url, payment_server):
        store = store_for(server_url, payment_server)

        pro = await store.get()
        ai = await store.get(SubscriptionPlan.AI)

        assert pro.plan == SubscriptionPlan.PRO
        assert ai.recurring == SubscriptionRecurring.YEARLY
        assert await store.get(SubscriptionPlan.TEAM) is None
        assert payment_server.paths().count("GET /api/subscriptions") == 1

    async def test_revalidate_replaces_cache(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        await store.get()
        store.mutate(SubscriptionPlan.PRO, {"status": SubscriptionStatus.PAST_DUE})

        subscriptions = await store.revalidate()

        assert [s.plan for s in subscriptions] == [SubscriptionPlan.PRO, SubscriptionPlan.AI]
        assert (await store.get()).status == SubscriptionStatus.ACTIVE

    async def test_mutate_merges_into_matching_plan(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        await store.revalidate()

        store.mutate(SubscriptionPlan.AI, {"status": SubscriptionStatus.CANCELED})

        assert store.subscriptions[0].status == SubscriptionStatus.ACTIVE
        assert store.subscriptions[1].status == SubscriptionStatus.CANCELED
        assert store.subscriptions[1].recurring == SubscriptionRecurring.YEARLY

    async def test_mutate_validates_plain_values(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        await store.revalidate()

        store.mutate(SubscriptionPlan.PRO, {"status": "canceled", "canceled_at": "2026-01-15T00:00:00"})

        pro = store.subscriptions[0]
        assert pro.status is SubscriptionStatus.CANCELED
        assert pro.canceled_at.day == 15

    async def test_mutate_rejects_invalid_values(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        await store.revalidate()

        with pytest.raises(ValidationError):
            store.mutate(SubscriptionPlan.PRO, {"status": "unknown"})

    async def test_mutate_noops(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        store.mutate(SubscriptionPlan.PRO, {"status": SubscriptionStatus.CANCELED})
        assert store.subscriptions is None

        await store.revalidate()
        before = list(store.subscriptions)
        store.mutate(SubscriptionPlan.PRO, None)
        store.mutate(SubscriptionPlan.PRO, {})
        store.mutate(SubscriptionPlan.TEAM, {"status": SubscriptionStatus.CANCELED})

        assert store.subscriptions == before

    async def test_cancel_and_resume(self, server_url, payment_server):
        store = store_for(server_url, payment_server)
        await store.revalidate()

        canceled = await store.cancel()

        assert canceled.canceled_at is not None
        assert (await store.get()).canceled_at == canceled.canceled_at

        await store.resume()

        assert (await store.get()).canceled_at is None
        assert "POST /api/subscriptions/pro/resume" in payment_server.paths()

    async def test_cancel_unknown_plan(self, server_url, payment_server):
        store = store_for(server_url, payment_server)

        with pytest.raises(SubscriptionNotFound):
            await store.cancel(SubscriptionPlan.TEAM)

    async def test_subscriptions_are_parsed(self, server_url, payment_server):
        store = store_for(server_url, payment_server)

        [pro, _] = await store.revalidate()

        assert json.loads(pro.model_dump_json())["plan"] == "pro"
        assert pro.start.year == 2026
