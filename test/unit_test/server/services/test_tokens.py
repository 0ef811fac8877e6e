"""Unit tests for single-use verification tokens."""

from datetime import timedelta

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.models.domain.enums import TokenType
from affine_cloud.server.core.config import settings
from affine_cloud.server.services.tokens import TokenService


class TestTokenService:
    async def test_create_token(self, repos):
        token = await TokenService(repos).create_token(TokenType.SIGN_IN, "u1@affine.pro")

        record = await repos.tokens.find(token, TokenType.SIGN_IN)
        assert record is not None
        assert record.credential == "u1@affine.pro"
        remaining = record.expires_at - utc_now()
        assert timedelta(seconds=settings.magic_link_ttl_seconds - 60) < remaining
        assert remaining <= timedelta(seconds=settings.magic_link_ttl_seconds)

    async def test_tokens_are_unique(self, repos):
        service = TokenService(repos)

        tokens = {await service.create_token(TokenType.SIGN_IN, "u1@affine.pro") for _ in range(5)}

        assert len(tokens) == 5

    async def test_verify_consumes_token(self, repos):
        service = TokenService(repos)
        token = await service.create_token(TokenType.SIGN_IN, "u1@affine.pro")

        assert await service.verify_token(TokenType.SIGN_IN, token, "u1@affine.pro") is not None
        assert await service.verify_token(TokenType.SIGN_IN, token, "u1@affine.pro") is None

    async def test_verify_keep(self, repos):
        service = TokenService(repos)
        token = await service.create_token(TokenType.VERIFY_EMAIL)

        assert await service.verify_token(TokenType.VERIFY_EMAIL, token, keep=True) is not None
        assert await service.verify_token(TokenType.VERIFY_EMAIL, token) is not None
        assert await service.verify_token(TokenType.VERIFY_EMAIL, token) is None

    async def test_verify_wrong_type(self, repos):
        service = TokenService(repos)
        token = await service.create_token(TokenType.VERIFY_EMAIL, "u1@affine.pro")

        assert await service.verify_token(TokenType.SIGN_IN, token, "u1@affine.pro") is None

    async def test_verify_credential_mismatch_keeps_token(self, repos):
        """A token presented with another email is rejected but stays valid for its owner."""
        service = TokenService(repos)
        token = await service.create_token(TokenType.SIGN_IN, "u1@affine.pro")

        assert await service.verify_token(TokenType.SIGN_IN, token, "u2@affine.pro") is None
        assert await service.verify_token(TokenType.SIGN_IN, token, "U1@affine.pro") is not None

    async def test_verify_expired(self, repos):
        service = TokenService(repos)
        token = await service.create_token(TokenType.SIGN_IN, "u1@affine.pro", ttl=-1)

        assert await service.verify_token(TokenType.SIGN_IN, token, "u1@affine.pro") is None
        assert await repos.tokens.find(token, TokenType.SIGN_IN) is None

    async def test_verify_unknown(self, repos):
        assert await TokenService(repos).verify_token(TokenType.SIGN_IN, "nope") is None
