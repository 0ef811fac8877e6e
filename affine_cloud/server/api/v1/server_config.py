"""
Server Config Endpoint.

Describes this server to clients: name, version, base URL, enabled features
and the sign-in policy.
"""

from fastapi import APIRouter

from affine_cloud.core.models.io import AuthPolicy, PasswordLimits, ServerConfig
from affine_cloud.server.core.config import settings

router = APIRouter(tags=["server-config"])


@router.get(
    "",
    response_model=ServerConfig,
    summary="Get Server Config",
    description="Retrieve the public configuration of this server.",
    response_description="Server config object.",
)
async def get_server_config() -> ServerConfig:
    return ServerConfig(
        name=settings.server_name,
        version=settings.server_version,
        base_url=settings.external_url,
        features=settings.features,
        auth_policy=AuthPolicy(
            early_access_preview=settings.early_access_preview,
            password=PasswordLimits(
                min_length=settings.password_min_length,
                max_length=settings.password_max_length,
            ),
        ),
    )
