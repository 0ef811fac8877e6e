"""Unit tests for the feature service."""

import pytest

from affine_cloud.core.models.domain.enums import FeatureType
from affine_cloud.server.core.config import AuthConfig
from affine_cloud.server.services.features import FeatureService


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(early_access_preview=True, staff_email_domains=["toeverything.info"])


class TestFeatureService:
    @pytest.mark.parametrize(
        ("email", "expected"),
        [
            ("dev@toeverything.info", True),
            ("dev@TOEVERYTHING.INFO", True),
            ("dev@affine.pro", False),
            ("not-an-email", False),
        ],
    )
    def test_is_staff(self, repos, auth_config, email, expected):
        assert FeatureService(repos, auth_config).is_staff(email) is expected

    async def test_staff_is_early_access_user(self, repos, auth_config):
        assert await FeatureService(repos, auth_config).is_early_access_user("dev@toeverything.info")

    async def test_unknown_user_is_not_early_access(self, repos, auth_config):
        assert not await FeatureService(repos, auth_config).is_early_access_user("nobody@affine.pro")

    async def test_add_early_access_user(self, repos, auth_config, u1):
        service = FeatureService(repos, auth_config)
        assert not await service.is_early_access_user(u1.email)

        await service.add_early_access_user(u1.id)
        await service.add_early_access_user(u1.id)

        assert await service.is_early_access_user(u1.email)
        assert await service.list_user_features(u1.id) == [FeatureType.EARLY_ACCESS]

    async def test_deactivated_feature_is_ignored(self, repos, auth_config, u1):
        service = FeatureService(repos, auth_config)
        feature = await repos.features.add_feature(u1.id, FeatureType.EARLY_ACCESS)
        feature.activated = False
        await repos.features.update(feature)

        assert not await service.is_early_access_user(u1.email)
        assert await service.list_user_features(u1.id) == []
