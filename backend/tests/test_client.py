"""Client data layer tests: caching, invalidation and error surfacing."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from remote_orchestration.client import HOSTS, REMOTES, ApiError, OrchestrationClient, QueryCache
from remote_orchestration.schemas.host import HostRequest
from remote_orchestration.schemas.remote import RemoteRequest


class TestQueryCache:
    def test_prefix_invalidation(self):
        cache = QueryCache()
        cache.set(("hosts",), ["list"])
        cache.set(("hosts", 1), "one")
        cache.set(("hosts", 1, "remotes"), [])
        cache.set(("remotes",), [])

        assert cache.invalidate(("hosts",)) == 3
        assert ("hosts", 1) not in cache
        assert ("remotes",) in cache

    def test_narrow_prefix(self):
        cache = QueryCache()
        cache.set(("hosts", 1), "one")
        cache.set(("hosts", 2), "two")
        cache.invalidate(("hosts", 1))
        assert ("hosts", 1) not in cache
        assert cache.get(("hosts", 2)) == "two"

    def test_miss_returns_none(self):
        assert QueryCache().get(("tags",)) is None


@pytest.mark.asyncio
class TestOrchestrationClient:
    async def test_reads_are_cached(self, api: OrchestrationClient, client: AsyncClient):
        assert await api.list_hosts() == []
        # Written behind the client's back; the cached list is served
        await client.post("/api/hosts", json={"name": "sneaky"})
        assert await api.list_hosts() == []

        api.cache.invalidate(HOSTS)
        assert [h.name for h in await api.list_hosts()] == ["sneaky"]

    async def test_list_and_item_use_separate_keys(self, api: OrchestrationClient):
        host = await api.create_host(HostRequest(name="storefront", environment="prod"))
        await api.list_hosts()
        await api.get_host(host.id)
        await api.list_host_remotes(host.id)

        assert HOSTS in api.cache
        assert HOSTS + (host.id,) in api.cache
        assert HOSTS + (host.id, "remotes") in api.cache

    async def test_mutation_invalidates(self, api: OrchestrationClient):
        host = await api.create_host(HostRequest(name="storefront"))
        remote = await api.create_remote(RemoteRequest(name="checkout"))
        assert await api.list_host_remotes(host.id) == []

        await api.attach_remote(host.id, remote.id)
        assert HOSTS + (host.id, "remotes") not in api.cache
        listed = await api.list_host_remotes(host.id)
        assert [r.remote_id for r in listed] == [remote.id]

        await api.detach_remote(host.id, remote.id)
        assert await api.list_host_remotes(host.id) == []

    async def test_create_invalidates_list(self, api: OrchestrationClient):
        assert await api.list_remotes() == []
        await api.create_remote(RemoteRequest(name="catalog", modules=["./List"]))
        assert REMOTES not in api.cache
        remotes = await api.list_remotes()
        assert [r.name for r in remotes] == ["catalog"]
        assert [m.name for m in remotes[0].modules] == ["./List"]

    async def test_assign_and_counts(self, api: OrchestrationClient):
        host = await api.create_host(HostRequest(name="h"))
        remote = await api.create_remote(RemoteRequest(name="r", modules=["./A"]))
        await api.assign_remote(host.id, remote.id)
        assert [r.id for r in await api.list_host_remotes(host.id)] == [remote.id]

        counts = await api.remote_module_counts()
        assert [(c.remote_id, c.count) for c in counts] == [(remote.id, 1)]

    async def test_hosts_by_environment(self, api: OrchestrationClient):
        await api.create_host(HostRequest(name="a", environment="prod"))
        await api.create_host(HostRequest(name="b", environment="dev"))
        assert [h.name for h in await api.hosts_by_environment("prod")] == ["a"]
        assert HOSTS + ("environment", "prod") in api.cache

    @pytest.mark.parametrize("environment", ["eu/west", "canary?beta", "blue#2", "qa 1"])
    async def test_environment_is_sent_as_one_segment(self, api: OrchestrationClient, environment: str):
        await api.create_host(HostRequest(name="odd", environment=environment))
        await api.create_host(HostRequest(name="plain", environment="eu"))
        assert [h.name for h in await api.hosts_by_environment(environment)] == ["odd"]

    async def test_error_message_surfaces_verbatim(self, api: OrchestrationClient):
        with pytest.raises(ApiError) as excinfo:
            await api.get_host(999)
        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Host 999 not found"
        assert HOSTS + (999,) not in api.cache

    async def test_attach_unknown_remote_raises(self, api: OrchestrationClient):
        host = await api.create_host(HostRequest(name="h"))
        with pytest.raises(ApiError) as excinfo:
            await api.attach_remote(host.id, 404)
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "Remote 404 not found"

    async def test_tag_lifecycle(self, api: OrchestrationClient):
        tag = await api.create_tag("shared")
        assert [t.text for t in await api.list_tags()] == ["shared"]
        await api.update_tag(tag.id, "common")
        assert (await api.get_tag(tag.id)).text == "common"
        await api.delete_tag(tag.id)
        assert await api.list_tags() == []
