"""Server configuration I/O models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..domain.enums import ServerFeature


class PasswordLimits(BaseModel):
    min_length: int
    max_length: int


class AuthPolicy(BaseModel):
    """Sign-in rules advertised to clients."""

    early_access_preview: bool = False
    password: PasswordLimits


class ServerConfig(BaseModel):
    """Response of ``GET /api/server-config``."""

    name: str = Field(description="Display name of the server")
    version: str = Field(description="Server version")
    base_url: str = Field(description="Public base URL of the server")
    features: List[ServerFeature] = Field(default_factory=list, description="Enabled server features")
    auth_policy: AuthPolicy
