from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from affine_cloud.core.errors import AccessDenied

SERVER_URL = "http://localhost:3010"


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def paths(self) -> List[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]


@pytest.fixture
def server_url() -> str:
    return SERVER_URL


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def server_config() -> Callable[..., Dict[str, Any]]:
    """Factory of ``/api/server-config`` bodies."""

    def build(features: Optional[List[str]] = None, version: str = "0.14.0") -> Dict[str, Any]:
        return {
            "name": "AFFiNE Cloud",
            "version": version,
            "base_url": SERVER_URL,
            "features": features or [],
            "auth_policy": {"early_access_preview": False, "password": {"min_length": 8, "max_length": 32}},
        }

    return build


@pytest.fixture
def subscription_record() -> Callable[..., Dict[str, Any]]:
    """Factory of subscription bodies as returned by ``/api/subscriptions``."""

    def build(plan: str = "pro", **fields: Any) -> Dict[str, Any]:
        record = {
            "id": f"sub-{plan}",
            "plan": plan,
            "recurring": "monthly",
            "status": "active",
            "start": "2026-01-01T00:00:00",
            "end": "2026-02-01T00:00:00",
            "next_bill_at": "2026-02-01T00:00:00",
            "canceled_at": None,
            "created_at": "2026-01-01T00:00:00",
            "updated_at": "2026-01-01T00:00:00",
        }
        record.update(fields)
        return record

    return build


@pytest.fixture
def access_denied() -> httpx.Response:
    return httpx.Response(403, json=AccessDenied().to_json())
