"""Verification token repository."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from affine_cloud.core.models.domain.enums import TokenType

from ..entities.tokens import VerificationToken
from .base import AsyncBaseRepository


class VerificationTokenRepository(AsyncBaseRepository[VerificationToken]):
    """Repository for single-use verification tokens."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VerificationToken)

    async def issue(
        self, token: str, type: TokenType, credential: Optional[str], expires_at: datetime
    ) -> VerificationToken:
        return await self.create(
            VerificationToken(token=token, type=type, credential=credential, expires_at=expires_at)
        )

    async def find(self, token: str, type: TokenType) -> Optional[VerificationToken]:
        return await self.get_by_id((token, type))

    async def consume(self, record: VerificationToken) -> None:
        await self.session.delete(record)
        await self.session.commit()
