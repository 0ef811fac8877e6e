"""
Verification token entity.

Tokens back emailed magic links. They are single-use and bound to the email
address (``credential``) they were issued for.
"""

from __future__ import annotations

from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field

from affine_cloud.core.models.domain.enums import TokenType

from ..base import Base, utc_now


class VerificationToken(Base, table=True):
    """Single-use token sent by email.

    Table: verification_tokens
    """

    __tablename__ = "verification_tokens"
    __table_args__ = ({"extend_existing": True},)

    token: str = Field(primary_key=True, max_length=128)
    type: TokenType = Field(primary_key=True)
    credential: Optional[str] = Field(default=None, max_length=255)
    expires_at: NaiveDatetime = Field(sa_type=DateTime)
    created_at: NaiveDatetime = Field(default_factory=utc_now, sa_type=DateTime)
