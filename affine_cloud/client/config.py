"""
Client configuration.

Loaded from environment variables and ``.env`` the same way as the server
settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings used by the client package."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    server_url: str = Field(
        default="http://localhost:3010",
        description="Base URL of the default AFFiNE server",
        alias="AFFINE_CLIENT_SERVER_URL",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds of requests sent to the server",
        alias="AFFINE_CLIENT_REQUEST_TIMEOUT",
    )


client_settings = ClientSettings()
