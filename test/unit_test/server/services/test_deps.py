"""Unit tests for request-scoped dependencies and session extraction."""

from typing import Optional
from unittest.mock import Mock

import pytest
from fastapi import Request

from affine_cloud.core.errors import AuthenticationRequired
from affine_cloud.server.services.auth import AuthService
from affine_cloud.server.services.deps import (
    AuthServiceDep,
    extract_session_id,
    extract_user_id,
    get_auth_service,
    get_current_user,
    get_optional_user,
)


def make_request(cookies: Optional[dict] = None, headers: Optional[dict] = None) -> Request:
    request = Mock(spec=Request)
    request.cookies = cookies or {}
    request.headers = headers or {}
    return request


class TestExtractSessionId:
    def test_cookie(self):
        assert extract_session_id(make_request(cookies={"sid": "abc"})) == "abc"

    def test_bearer(self):
        assert extract_session_id(make_request(headers={"authorization": "Bearer abc"})) == "abc"

    def test_cookie_wins_over_bearer(self):
        request = make_request(cookies={"sid": "cookie"}, headers={"authorization": "Bearer header"})

        assert extract_session_id(request) == "cookie"

    @pytest.mark.parametrize("authorization", ["", "Basic abc", "Bearer ", "Bearer"])
    def test_no_session(self, authorization):
        assert extract_session_id(make_request(headers={"authorization": authorization})) is None


class TestExtractUserId:
    def test_header(self):
        assert extract_user_id(make_request(headers={"x-auth-user": "u1"})) == "u1"

    def test_missing(self):
        assert extract_user_id(make_request()) is None


class TestUserResolution:
    async def test_optional_user_without_session(self, repos, mailer):
        assert await get_optional_user(make_request(), AuthService(repos, mailer)) is None

    async def test_optional_user(self, repos, mailer, u1):
        auth = AuthService(repos, mailer)
        user_session = await auth.create_user_session(u1)

        user = await get_optional_user(make_request(cookies={"sid": user_session.session_id}), auth)

        assert user.id == u1.id

    async def test_current_user_required(self):
        with pytest.raises(AuthenticationRequired):
            await get_current_user(None)

    def test_auth_service_dep(self):
        assert AuthServiceDep.__metadata__[0].dependency is get_auth_service
