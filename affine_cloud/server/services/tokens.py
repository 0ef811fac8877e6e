"""
Token service.

Issues the single-use tokens embedded in emailed links and verifies them.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from affine_cloud.core.database.base import utc_now
from affine_cloud.core.database.entities.tokens import VerificationToken
from affine_cloud.core.database.repositories import RepoBundle
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import TokenType
from affine_cloud.server.core.config import settings
from affine_cloud.server.core.security import generate_token

logger = get_logger(__name__)


class TokenService:
    def __init__(self, repos: RepoBundle):
        self.repos = repos

    async def create_token(self, type: TokenType, credential: Optional[str] = None, ttl: Optional[int] = None) -> str:
        """
        Issue a new token.

        Args:
            type: Purpose of the token
            credential: Value the token is bound to (the email for sign-in tokens)
            ttl: Lifetime in seconds, defaults to the magic link TTL

        Returns:
            The URL-safe token string
        """
        token = generate_token()
        expires_at = utc_now() + timedelta(seconds=ttl if ttl is not None else settings.magic_link_ttl_seconds)
        await self.repos.tokens.issue(token, type, credential, expires_at)
        return token

    async def verify_token(
        self, type: TokenType, token: str, credential: Optional[str] = None, keep: bool = False
    ) -> Optional[VerificationToken]:
        """
        Verify a token and consume it.

        Unknown tokens, expired tokens and tokens bound to another credential
        yield None. Expired tokens are removed on sight.

        Args:
            type: Expected purpose
            token: Token string from the link
            credential: Credential the token must be bound to, when given
            keep: Keep the token for later use instead of consuming it

        Returns:
            The token record, or None when invalid
        """
        record = await self.repos.tokens.find(token, type)
        if record is None:
            return None

        if record.expires_at <= utc_now():
            logger.debug(f"Rejected expired {type.value} token")
            await self.repos.tokens.consume(record)
            return None

        if credential is not None and (record.credential or "").lower() != credential.lower():
            return None

        if not keep:
            await self.repos.tokens.consume(record)
        return record
