"""
Typed async client for the admin API.

Reads are cached per key (resource type, then id / sub-resource); every
mutation drops the list-level key of each resource it touches, prefix
matched, so the next read sees the change. Non-2xx responses raise
:class:`ApiError` carrying the server's message; nothing is retried.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from remote_orchestration.config import settings
from remote_orchestration.schemas.common import RemoteCountOut
from remote_orchestration.schemas.host import HostOut, HostRequest
from remote_orchestration.schemas.remote import RemoteOut, RemoteRequest
from remote_orchestration.schemas.tag import TagOut, TagRequest
from remote_orchestration.utils.logging import get_logger

log = get_logger("client")

T = TypeVar("T")
CacheKey = tuple[Any, ...]

HOSTS: CacheKey = ("hosts",)
REMOTES: CacheKey = ("remotes",)
TAGS: CacheKey = ("tags",)


class ApiError(Exception):
    """A request came back with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class QueryCache:
    """Keyed result cache with prefix invalidation."""

    def __init__(self):
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> Any:
        return self._entries.get(key)

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, prefix: CacheKey) -> int:
        """Drop every entry whose key starts with *prefix*."""
        stale = [k for k in self._entries if k[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()


class OrchestrationClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cache = QueryCache()
        self._http = httpx.AsyncClient(
            base_url=(base_url or settings.backend_url).rstrip("/"),
            timeout=httpx.Timeout(timeout or settings.client_timeout, connect=10),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> OrchestrationClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── plumbing ────────────────────────────────

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        resp = await self._http.request(method, path, json=json)
        if resp.is_success:
            return resp
        message = resp.reason_phrase or "Request failed"
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        log.info("api_error", method=method, path=path, status=resp.status_code, error=message)
        raise ApiError(resp.status_code, message)

    async def _query(self, key: CacheKey, path: str, parse: Callable[[Any], T]) -> T:
        if key in self.cache:
            return self.cache.get(key)
        resp = await self._request("GET", path)
        value = parse(resp.json())
        self.cache.set(key, value)
        return value

    async def _mutate(self, call: Awaitable[httpx.Response], *invalidates: CacheKey) -> httpx.Response:
        resp = await call
        for prefix in invalidates:
            self.cache.invalidate(prefix)
        return resp

    @staticmethod
    def _body(model) -> dict:
        return model.model_dump(mode="json", by_alias=True)

    # ── hosts ───────────────────────────────────

    async def list_hosts(self) -> list[HostOut]:
        return await self._query(HOSTS, "/hosts", TypeAdapter(list[HostOut]).validate_python)

    async def get_host(self, host_id: int) -> HostOut:
        return await self._query(HOSTS + (host_id,), f"/hosts/{host_id}", HostOut.model_validate)

    async def hosts_by_environment(self, environment: str) -> list[HostOut]:
        return await self._query(
            HOSTS + ("environment", environment),
            f"/hosts/environment/{quote(environment, safe='')}",
            TypeAdapter(list[HostOut]).validate_python,
        )

    async def list_host_remotes(self, host_id: int) -> list[RemoteOut]:
        return await self._query(
            HOSTS + (host_id, "remotes"), f"/hosts/{host_id}/remotes", TypeAdapter(list[RemoteOut]).validate_python,
        )

    async def create_host(self, host: HostRequest) -> HostOut:
        resp = await self._mutate(self._request("POST", "/hosts", self._body(host)), HOSTS, TAGS)
        return HostOut.model_validate(resp.json())

    async def update_host(self, host_id: int, host: HostRequest) -> None:
        await self._mutate(self._request("PUT", f"/hosts/{host_id}", self._body(host)), HOSTS, TAGS)

    async def delete_host(self, host_id: int) -> None:
        await self._mutate(self._request("DELETE", f"/hosts/{host_id}"), HOSTS)

    async def attach_remote(self, host_id: int, remote_id: int) -> None:
        await self._mutate(self._request("POST", f"/hosts/{host_id}/attach", {"remoteId": remote_id}), HOSTS)

    async def assign_remote(self, host_id: int, remote_id: int) -> None:
        await self._mutate(
            self._request("POST", "/hosts/assign", {"hostId": host_id, "remoteId": remote_id}), HOSTS,
        )

    async def detach_remote(self, host_id: int, remote_id: int) -> None:
        await self._mutate(self._request("DELETE", f"/hosts/{host_id}/remotes/{remote_id}"), HOSTS)

    # ── remotes ─────────────────────────────────

    async def list_remotes(self) -> list[RemoteOut]:
        return await self._query(REMOTES, "/remotes", TypeAdapter(list[RemoteOut]).validate_python)

    async def get_remote(self, remote_id: int) -> RemoteOut:
        return await self._query(REMOTES + (remote_id,), f"/remotes/{remote_id}", RemoteOut.model_validate)

    async def remote_module_counts(self) -> list[RemoteCountOut]:
        return await self._query(
            REMOTES + ("module-counts",), "/remotes/module-counts", TypeAdapter(list[RemoteCountOut]).validate_python,
        )

    async def remote_sub_remote_counts(self) -> list[RemoteCountOut]:
        return await self._query(
            REMOTES + ("sub-remote-counts",),
            "/remotes/sub-remote-counts",
            TypeAdapter(list[RemoteCountOut]).validate_python,
        )

    async def create_remote(self, remote: RemoteRequest) -> RemoteOut:
        resp = await self._mutate(self._request("POST", "/remotes", self._body(remote)), REMOTES, TAGS)
        return RemoteOut.model_validate(resp.json())

    async def update_remote(self, remote_id: int, remote: RemoteRequest) -> None:
        # Host remote listings embed remote fields
        await self._mutate(
            self._request("PUT", f"/remotes/{remote_id}", self._body(remote)), REMOTES, HOSTS, TAGS,
        )

    async def delete_remote(self, remote_id: int) -> None:
        await self._mutate(self._request("DELETE", f"/remotes/{remote_id}"), REMOTES, HOSTS)

    async def attach_tag(self, remote_id: int, tag_id: int) -> None:
        await self._mutate(self._request("POST", f"/remotes/{remote_id}/tags/{tag_id}"), REMOTES, HOSTS)

    async def detach_tag(self, remote_id: int, tag_id: int) -> None:
        await self._mutate(self._request("DELETE", f"/remotes/{remote_id}/tags/{tag_id}"), REMOTES, HOSTS)

    # ── tags ────────────────────────────────────

    async def list_tags(self) -> list[TagOut]:
        return await self._query(TAGS, "/tags", TypeAdapter(list[TagOut]).validate_python)

    async def get_tag(self, tag_id: int) -> TagOut:
        return await self._query(TAGS + (tag_id,), f"/tags/{tag_id}", TagOut.model_validate)

    async def create_tag(self, text: str) -> TagOut:
        resp = await self._mutate(self._request("POST", "/tags", self._body(TagRequest(text=text))), TAGS)
        return TagOut.model_validate(resp.json())

    async def update_tag(self, tag_id: int, text: str) -> None:
        await self._mutate(
            self._request("PUT", f"/tags/{tag_id}", self._body(TagRequest(text=text))), TAGS, REMOTES, HOSTS,
        )

    async def delete_tag(self, tag_id: int) -> None:
        await self._mutate(self._request("DELETE", f"/tags/{tag_id}"), TAGS, REMOTES, HOSTS)
