from affine_cloud.core.database.entities import Workspace
from affine_cloud.core.models.domain.enums import Permission, PublishMode


class TestWorkspaceRepository:
    async def test_grant_replaces_level(self, repos, user):
        workspace = await repos.workspaces.create(Workspace())

        await repos.workspaces.grant(workspace.id, user.id, Permission.READ, accepted=False)
        await repos.workspaces.grant(workspace.id, user.id, Permission.ADMIN)

        [permission] = await repos.workspaces.list_permissions(workspace.id)
        assert permission.type == Permission.ADMIN
        assert permission.accepted is True

    async def test_upsert_page(self, repos):
        workspace = await repos.workspaces.create(Workspace())

        await repos.workspaces.upsert_page(workspace.id, "page", public=True, mode=PublishMode.EDGELESS)
        page = await repos.workspaces.upsert_page(workspace.id, "page", public=False, mode=PublishMode.EDGELESS)

        assert page.public is False
        assert (await repos.workspaces.get_page(workspace.id, "page")).mode == PublishMode.EDGELESS

    async def test_count_public_pages(self, repos):
        workspace = await repos.workspaces.create(Workspace())
        other = await repos.workspaces.create(Workspace())
        await repos.workspaces.upsert_page(workspace.id, "a", public=True)
        await repos.workspaces.upsert_page(workspace.id, "b", public=False)
        await repos.workspaces.upsert_page(other.id, "c", public=True)

        assert await repos.workspaces.count_public_pages(workspace.id) == 1

    async def test_upsert_snapshot(self, repos):
        workspace = await repos.workspaces.create(Workspace())

        first = await repos.workspaces.upsert_snapshot(workspace.id, "doc", b"v1")
        second = await repos.workspaces.upsert_snapshot(workspace.id, "doc", b"v2")

        assert second.blob == b"v2"
        assert second.updated_at >= first.created_at
        assert (await repos.workspaces.get_snapshot(workspace.id, "doc")).blob == b"v2"
        assert await repos.workspaces.get_snapshot(workspace.id, "missing") is None
