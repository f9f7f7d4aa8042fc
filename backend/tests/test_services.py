"""Entity service tests: CRUD with full-replace updates."""

from __future__ import annotations

import pytest

from remote_orchestration.errors import ConflictError, NotFoundError, ValidationError
from remote_orchestration.models import HostTag, RemoteModule, RemoteSubRemote, Tag, TagRemote
from remote_orchestration.schemas.host import HostRequest, HostTagItem
from remote_orchestration.schemas.remote import RemoteRequest
from remote_orchestration.schemas.tag import TagRequest
from remote_orchestration.services.host_service import HostService
from remote_orchestration.services.remote_service import RemoteService
from remote_orchestration.services.tag_service import TagService


@pytest.mark.asyncio
class TestHostService:
    async def test_create_and_get(self, host_service: HostService):
        host = await host_service.create_host(HostRequest(
            name="storefront", environment="prod", url="https://shop.example.com",
            tags=[HostTagItem(key="team", value="shell")],
        ))
        fetched = await host_service.get_host(host.id)
        assert fetched.name == "storefront"
        assert fetched.environment == "prod"
        assert [(link.key, link.tag.text) for link in fetched.tag_links] == [("team", "shell")]

    async def test_get_unknown(self, host_service: HostService):
        with pytest.raises(NotFoundError):
            await host_service.get_host(404)

    async def test_update_replaces_every_field(self, host_service: HostService):
        host = await host_service.create_host(HostRequest(
            name="storefront", environment="prod", description="old",
            tags=[HostTagItem(value="a"), HostTagItem(value="b")],
        ))
        created = host.created_date

        await host_service.update_host(host.id, HostRequest(name="storefront-v2", tags=[HostTagItem(value="b")]))

        assert host.name == "storefront-v2"
        assert host.environment is None
        assert host.description is None
        assert [(link.key, link.tag.text) for link in host.tag_links] == [("tag", "b")]
        assert host.created_date == created
        assert host.updated_date >= created

    async def test_update_unknown(self, host_service: HostService):
        with pytest.raises(NotFoundError):
            await host_service.update_host(9, HostRequest(name="x"))

    async def test_list_ordered_by_name(self, host_service: HostService):
        for name in ("zeta", "alpha", "mid"):
            await host_service.create_host(HostRequest(name=name))
        assert [h.name for h in await host_service.list_hosts()] == ["alpha", "mid", "zeta"]

    async def test_delete_drops_labels(self, repo, host_service: HostService):
        host = await host_service.create_host(HostRequest(name="h", tags=[HostTagItem(value="x")]))
        await host_service.delete_host(host.id)
        assert await host_service.list_hosts() == []
        assert await repo.list_where(HostTag) == []
        # Tag values are shared and survive
        assert [t.text for t in await repo.list_where(Tag)] == ["x"]

    async def test_delete_unknown(self, host_service: HostService):
        with pytest.raises(NotFoundError):
            await host_service.delete_host(1)


@pytest.mark.asyncio
class TestRemoteService:
    async def test_create_with_children(self, remote_service: RemoteService):
        shared = await remote_service.create_remote(RemoteRequest(name="shared-ui"))
        remote = await remote_service.create_remote(RemoteRequest(
            name="checkout", storage_type="s3", scope="checkout",
            modules=["./Cart", "./Payment", "./Cart"], tags=["checkout"], sub_remote_ids=[shared.id],
        ))
        assert sorted(m.name for m in remote.modules) == ["./Cart", "./Payment"]
        assert [link.tag.text for link in remote.tag_links] == ["checkout"]
        assert await remote_service.sub_remote_ids([remote]) == {remote.id: [shared.id]}

    async def test_create_with_unknown_sub_remote(self, remote_service: RemoteService):
        with pytest.raises(ValidationError):
            await remote_service.create_remote(RemoteRequest(name="orphan", sub_remote_ids=[99]))

    async def test_update_replaces_modules(self, repo, remote_service: RemoteService):
        remote = await remote_service.create_remote(RemoteRequest(name="catalog", modules=["./A", "./B"]))
        await remote_service.update_remote(remote.id, RemoteRequest(name="catalog", modules=["./B", "./C"]))

        assert sorted(m.name for m in remote.modules) == ["./B", "./C"]
        rows = await repo.list_where(RemoteModule, order_by=RemoteModule.name)
        assert [m.name for m in rows] == ["./B", "./C"]

    async def test_update_clears_sub_remotes_and_tags(self, repo, remote_service: RemoteService):
        child = await remote_service.create_remote(RemoteRequest(name="child"))
        parent = await remote_service.create_remote(RemoteRequest(
            name="parent", tags=["x"], sub_remote_ids=[child.id],
        ))
        await remote_service.update_remote(parent.id, RemoteRequest(name="parent"))
        assert parent.tag_links == []
        assert await repo.list_where(RemoteSubRemote) == []
        assert await repo.list_where(TagRemote) == []

    async def test_update_self_reference_rejected(self, remote_service: RemoteService):
        remote = await remote_service.create_remote(RemoteRequest(name="loop"))
        with pytest.raises(ValidationError):
            await remote_service.update_remote(remote.id, RemoteRequest(name="loop", sub_remote_ids=[remote.id]))

    async def test_counts_include_zero(self, remote_service: RemoteService):
        leaf = await remote_service.create_remote(RemoteRequest(name="leaf"))
        busy = await remote_service.create_remote(RemoteRequest(
            name="busy", modules=["./A", "./B", "./C"], sub_remote_ids=[leaf.id],
        ))
        assert await remote_service.module_counts() == {leaf.id: 0, busy.id: 3}
        assert await remote_service.sub_remote_counts() == {leaf.id: 0, busy.id: 1}

    async def test_counts_empty_store(self, remote_service: RemoteService):
        assert await remote_service.module_counts() == {}
        assert await remote_service.sub_remote_counts() == {}

    async def test_delete_removes_modules(self, repo, remote_service: RemoteService):
        remote = await remote_service.create_remote(RemoteRequest(name="gone", modules=["./A"], tags=["t"]))
        await remote_service.delete_remote(remote.id)
        assert await remote_service.list_remotes() == []
        assert await repo.list_where(RemoteModule) == []
        assert await repo.list_where(TagRemote) == []

    async def test_delete_unknown(self, remote_service: RemoteService):
        with pytest.raises(NotFoundError):
            await remote_service.delete_remote(5)


@pytest.mark.asyncio
class TestTagService:
    async def test_crud(self, tag_service: TagService):
        tag = await tag_service.create_tag(TagRequest(text=" shared "))
        assert tag.text == "shared"
        await tag_service.update_tag(tag.id, TagRequest(text="common"))
        assert (await tag_service.get_tag(tag.id)).text == "common"
        await tag_service.delete_tag(tag.id)
        assert await tag_service.list_tags() == []

    async def test_duplicate_text_conflicts(self, tag_service: TagService):
        await tag_service.create_tag(TagRequest(text="shared"))
        with pytest.raises(ConflictError):
            await tag_service.create_tag(TagRequest(text="shared"))

    async def test_rename_onto_existing_conflicts(self, tag_service: TagService):
        await tag_service.create_tag(TagRequest(text="a"))
        b = await tag_service.create_tag(TagRequest(text="b"))
        with pytest.raises(ConflictError):
            await tag_service.update_tag(b.id, TagRequest(text="a"))
        # Renaming to the current text is a no-op, not a conflict
        await tag_service.update_tag(b.id, TagRequest(text="b"))

    async def test_delete_detaches_everywhere(
        self, repo, tag_service: TagService, host_service: HostService, remote_service: RemoteService,
    ):
        await remote_service.create_remote(RemoteRequest(name="r", tags=["shared"]))
        await host_service.create_host(HostRequest(name="h", tags=[HostTagItem(value="shared")]))
        tag = (await tag_service.list_tags())[0]

        await tag_service.delete_tag(tag.id)

        assert await repo.list_where(TagRemote) == []
        assert await repo.list_where(HostTag) == []
        with pytest.raises(NotFoundError):
            await tag_service.get_tag(tag.id)
