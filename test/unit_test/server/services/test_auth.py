"""
Unit tests for the authentication service.

Covers credential checks, early access gating and the multi-account
session model behind the ``sid`` cookie.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import Response

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.errors import WrongSignInCredentials
from affine_cloud.server.core.config import AuthConfig, settings
from affine_cloud.server.services.auth import AuthService
from affine_cloud.server.services.users import UserService


@pytest.fixture
def auth(repos, mailer) -> AuthService:
    return AuthService(repos, mailer, auth_config=AuthConfig(staff_email_domains=["toeverything.info"]))


@pytest.fixture
def preview_auth(repos, mailer) -> AuthService:
    return AuthService(
        repos, mailer, auth_config=AuthConfig(early_access_preview=True, staff_email_domains=["toeverything.info"])
    )


class TestCredentials:
    async def test_sign_up(self, auth):
        user = await auth.sign_up("Foo", "foo@affine.pro", "password")

        assert user.name == "Foo"
        assert user.has_password is True

    async def test_sign_in(self, auth, u1):
        user = await auth.sign_in(u1.email, "1")

        assert user.id == u1.id

    @pytest.mark.parametrize(("email", "password"), [("u1@affine.pro", "2"), ("nobody@affine.pro", "1")])
    async def test_sign_in_wrong_credentials(self, auth, u1, email, password):
        with pytest.raises(WrongSignInCredentials):
            await auth.sign_in(email, password)

    async def test_passwordless_user_cannot_sign_in_with_password(self, auth, repos):
        await UserService(repos).create_user("nopass@affine.pro")

        with pytest.raises(WrongSignInCredentials):
            await auth.sign_in("nopass@affine.pro", "")


class TestCanSignIn:
    async def test_open_server(self, auth):
        assert await auth.can_sign_in("anyone@affine.pro")

    async def test_preview_rejects_regular_user(self, preview_auth, u1):
        assert not await preview_auth.can_sign_in(u1.email)

    async def test_preview_allows_staff(self, preview_auth):
        assert await preview_auth.can_sign_in("dev@toeverything.info")

    async def test_preview_allows_early_access_user(self, preview_auth, u1):
        await preview_auth.features.add_early_access_user(u1.id)

        assert await preview_auth.can_sign_in(u1.email)


class TestSendSignInEmail:
    async def test_sign_in_mail(self, auth, mailer):
        await auth.send_sign_in_email("u1@affine.pro", "http://link", sign_up=False)

        mailer.send_sign_in_mail.assert_awaited_once_with("http://link", "u1@affine.pro")

    async def test_sign_up_mail(self, auth, mailer):
        await auth.send_sign_in_email("u1@affine.pro", "http://link", sign_up=True)

        mailer.send_sign_up_mail.assert_awaited_once_with("http://link", "u1@affine.pro")


class TestSessions:
    async def test_create_session(self, auth, u1):
        user_session = await auth.create_user_session(u1)

        assert user_session.user_id == u1.id
        assert (await auth.get_user(user_session.session_id)).id == u1.id

    async def test_join_existing_session(self, auth, repos, u1):
        u2 = await UserService(repos).create_user("u2@affine.pro")
        first = await auth.create_user_session(u1)

        second = await auth.create_user_session(u2, first.session_id)

        assert second.session_id == first.session_id
        users = await auth.get_user_list(first.session_id)
        assert [u.id for u in users] == [u2.id, u1.id]
        assert (await auth.get_user(first.session_id)).id == u2.id
        assert (await auth.get_user(first.session_id, u1.id)).id == u1.id

    async def test_unknown_session_id_starts_new_session(self, auth, u1):
        user_session = await auth.create_user_session(u1, "stale-sid")

        assert user_session.session_id != "stale-sid"

    async def test_sign_in_again_extends_session(self, auth, u1):
        first = await auth.create_user_session(u1, ttl=60)
        second = await auth.create_user_session(u1, first.session_id)

        assert second.id == first.id
        assert second.expires_at > utc_now() + timedelta(days=1)

    async def test_unknown_user_in_session(self, auth, u1):
        user_session = await auth.create_user_session(u1)

        assert await auth.get_user(user_session.session_id, "someone-else") is None

    async def test_expired_session(self, auth, u1):
        user_session = await auth.create_user_session(u1, ttl=-1)

        assert await auth.get_user(user_session.session_id) is None
        assert await auth.get_user_list(user_session.session_id) == []

    async def test_refresh_not_needed(self, auth, u1):
        user_session = await auth.create_user_session(u1)

        assert await auth.refresh_user_session_if_needed(user_session) is False

    async def test_refresh_near_expiry(self, auth, u1):
        user_session = await auth.create_user_session(u1, ttl=60)

        assert await auth.refresh_user_session_if_needed(user_session) is True
        assert user_session.expires_at > utc_now() + timedelta(seconds=auth.config.session_ttl_seconds - 60)

    async def test_refresh_custom_ttr(self, auth, u1):
        user_session = await auth.create_user_session(u1, ttl=3600)

        assert await auth.refresh_user_session_if_needed(user_session, ttr=60) is False
        assert await auth.refresh_user_session_if_needed(user_session, ttr=7200) is True


class TestSignOut:
    async def test_sign_out_everyone(self, auth, repos, u1):
        user_session = await auth.create_user_session(u1)

        assert await auth.sign_out(user_session.session_id) is None
        assert await repos.sessions.get_session(user_session.session_id) is None
        assert await auth.get_user(user_session.session_id) is None

    async def test_sign_out_one_user(self, auth, repos, u1):
        u2 = await UserService(repos).create_user("u2@affine.pro")
        first = await auth.create_user_session(u1)
        await auth.create_user_session(u2, first.session_id)

        remaining = await auth.sign_out(first.session_id, u2.id)

        assert remaining is not None
        assert remaining.id == first.session_id
        assert [u.id for u in await auth.get_user_list(first.session_id)] == [u1.id]

    async def test_sign_out_last_user(self, auth, repos, u1):
        user_session = await auth.create_user_session(u1)

        assert await auth.sign_out(user_session.session_id, u1.id) is None
        assert await repos.sessions.get_session(user_session.session_id) is None


class TestCookies:
    def test_set_cookie(self, auth):
        response = Response()

        auth.set_cookie(response, "abc")

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("sid=abc;")
        assert "HttpOnly" in cookie
        assert "SameSite=lax" in cookie
        assert f"Max-Age={auth.config.session_ttl_seconds}" in cookie

    def test_clear_cookie(self, auth):
        response = Response()

        auth.clear_cookie(response)

        cookie = response.headers["set-cookie"]
        assert cookie.startswith('sid="";')
        assert "Max-Age=0" in cookie

    def test_secure_cookie_for_https(self, repos, monkeypatch):
        monkeypatch.setattr(settings, "external_url", "https://app.affine.pro")
        response = Response()

        AuthService(repos, MagicMock()).set_cookie(response, "abc")

        assert "Secure" in response.headers["set-cookie"]
