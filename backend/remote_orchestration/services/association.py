"""
Association service — the only code that writes join rows.

Covers host↔remote attachment, remote↔tag and host↔tag labels, and the
remote→sub-remote graph. Attach is idempotent: attaching an attached pair
reports success without a second row, unless the caller asks for strict
creation semantics.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func, or_

from remote_orchestration.errors import ConflictError, NotFoundError, ValidationError
from remote_orchestration.models import Host, HostRemote, HostTag, Remote, RemoteSubRemote, Tag, TagRemote
from remote_orchestration.models._mixins import utcnow
from remote_orchestration.repository import Repository
from remote_orchestration.utils.logging import get_logger

log = get_logger("associations")


def dedupe(values: Iterable) -> list:
    """Drop duplicates, keep first-seen order."""
    seen: set = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


class AssociationService:
    def __init__(self, repo: Repository):
        self.repo = repo

    # ── lookups ─────────────────────────────────

    async def require_host(self, host_id: int) -> Host:
        host = await self.repo.find(Host, host_id)
        if host is None:
            raise NotFoundError(f"Host {host_id} not found")
        return host

    async def require_remote(self, remote_id: int) -> Remote:
        remote = await self.repo.find(Remote, remote_id)
        if remote is None:
            raise NotFoundError(f"Remote {remote_id} not found")
        return remote

    async def require_tag(self, tag_id: int) -> Tag:
        tag = await self.repo.find(Tag, tag_id)
        if tag is None:
            raise NotFoundError(f"Tag {tag_id} not found")
        return tag

    # ── host ↔ remote ───────────────────────────

    async def attach_remote_to_host(self, host_id: int, remote_id: int, *, strict: bool = False) -> bool:
        """Attach *remote_id* to *host_id*; ``True`` once the pair is attached.

        Raises :class:`NotFoundError` for unknown ids and, with ``strict``,
        :class:`ConflictError` when the pair already exists.
        """
        host = await self.require_host(host_id)
        await self.require_remote(remote_id)

        if await self._find_pair(host_id, remote_id) is not None:
            return self._already_attached(host_id, remote_id, strict)

        now = utcnow()
        try:
            await self.repo.insert(
                HostRemote(host_id=host_id, remote_id=remote_id, created_date=now, updated_date=now)
            )
        except ConflictError:
            # Either a concurrent attach inserted the pair first, or a
            # concurrent delete removed the host / remote (FK violation)
            if await self._find_pair(host_id, remote_id) is not None:
                return self._already_attached(host_id, remote_id, strict, raced=True)
            await self._require_still_present(host_id, remote_id)
            raise

        host.touch(now)
        await self.repo.update(host)
        log.info("remote_attached", host_id=host_id, remote_id=remote_id)
        return True

    async def _require_still_present(self, host_id: int, remote_id: int) -> None:
        """Re-read both rows from the database, bypassing the identity map."""
        if await self.repo.first_where(Host, Host.id == host_id) is None:
            raise NotFoundError(f"Host {host_id} not found")
        if await self.repo.first_where(Remote, Remote.id == remote_id) is None:
            raise NotFoundError(f"Remote {remote_id} not found")

    async def _find_pair(self, host_id: int, remote_id: int) -> HostRemote | None:
        return await self.repo.first_where(
            HostRemote, HostRemote.host_id == host_id, HostRemote.remote_id == remote_id,
        )

    @staticmethod
    def _already_attached(host_id: int, remote_id: int, strict: bool, raced: bool = False) -> bool:
        if strict:
            raise ConflictError(f"Remote {remote_id} is already attached to host {host_id}")
        log.info("association_exists", host_id=host_id, remote_id=remote_id, raced=raced)
        return True

    async def detach_remote_from_host(self, host_id: int, remote_id: int) -> bool:
        """Remove the pair if present; ``False`` when there was nothing to remove."""
        host = await self.require_host(host_id)
        await self.require_remote(remote_id)

        removed = await self.repo.delete_where(
            HostRemote, HostRemote.host_id == host_id, HostRemote.remote_id == remote_id,
        )
        if removed:
            host.touch()
            await self.repo.update(host)
            log.info("remote_detached", host_id=host_id, remote_id=remote_id)
        return bool(removed)

    async def list_remotes_for_host(self, host_id: int) -> Sequence[Remote]:
        await self.require_host(host_id)
        return await self.repo.select_joined(
            Remote, HostRemote, HostRemote.remote_id == Remote.id,
            HostRemote.host_id == host_id,
            order_by=Remote.name,
        )

    async def list_hosts_by_environment(self, environment: str, *, case_sensitive: bool = True) -> list[Host]:
        if case_sensitive:
            criterion = Host.environment == environment
        else:
            criterion = func.lower(Host.environment) == environment.lower()
        return await self.repo.list_where(Host, criterion, order_by=Host.name)

    # ── remote ↔ tag ────────────────────────────

    async def attach_tag_to_remote(self, remote_id: int, tag_id: int, *, strict: bool = False) -> bool:
        remote = await self.require_remote(remote_id)
        tag = await self.require_tag(tag_id)

        if await self._find_tag_link(remote_id, tag_id) is not None:
            if strict:
                raise ConflictError(f"Tag {tag_id} is already attached to remote {remote_id}")
            return True

        now = utcnow()
        try:
            await self.repo.insert(TagRemote(remote_id=remote_id, tag=tag, created_date=now, updated_date=now))
        except ConflictError:
            if await self._find_tag_link(remote_id, tag_id) is not None and not strict:
                return True
            if await self.repo.first_where(Remote, Remote.id == remote_id) is None:
                raise NotFoundError(f"Remote {remote_id} not found") from None
            if await self.repo.first_where(Tag, Tag.id == tag_id) is None:
                raise NotFoundError(f"Tag {tag_id} not found") from None
            raise

        remote.touch(now)
        await self.repo.update(remote)
        await self.repo.refresh(remote, "tag_links")
        log.info("tag_attached", remote_id=remote_id, tag_id=tag_id)
        return True

    async def _find_tag_link(self, remote_id: int, tag_id: int) -> TagRemote | None:
        return await self.repo.first_where(
            TagRemote, TagRemote.remote_id == remote_id, TagRemote.tag_id == tag_id,
        )

    async def detach_tag_from_remote(self, remote_id: int, tag_id: int) -> bool:
        remote = await self.require_remote(remote_id)
        await self.require_tag(tag_id)

        link = next((link for link in remote.tag_links if link.tag_id == tag_id), None)
        if link is None:
            return False
        remote.tag_links.remove(link)
        remote.touch()
        await self.repo.update(remote)
        log.info("tag_detached", remote_id=remote_id, tag_id=tag_id)
        return True

    async def resolve_tags(self, texts: Iterable[str]) -> list[Tag]:
        """Tags for *texts* in the given order, creating the missing ones."""
        wanted = dedupe(t.strip() for t in texts if t and t.strip())
        if not wanted:
            return []
        found = {t.text: t for t in await self.repo.list_where(Tag, Tag.text.in_(wanted))}
        for text in wanted:
            if text in found:
                continue
            now = utcnow()
            try:
                found[text] = await self.repo.insert(Tag(text=text, created_date=now, updated_date=now))
            except ConflictError:
                found[text] = await self.repo.first_where(Tag, Tag.text == text)
        return [found[text] for text in wanted]

    async def set_remote_tags(self, remote: Remote, texts: Iterable[str]) -> None:
        """Replace the remote's tags with *texts*."""
        tags = await self.resolve_tags(texts)
        wanted = {t.id for t in tags}
        now = utcnow()

        for link in [link for link in remote.tag_links if link.tag_id not in wanted]:
            remote.tag_links.remove(link)
        present = {link.tag_id for link in remote.tag_links}
        for tag in tags:
            if tag.id not in present:
                remote.tag_links.append(TagRemote(tag=tag, created_date=now, updated_date=now))
        await self.repo.update(remote)

    # ── host ↔ tag ──────────────────────────────

    async def set_host_tags(self, host: Host, items: Iterable[tuple[str, str]]) -> None:
        """Replace the host's key/value labels with *items*."""
        pairs = dedupe((key.strip() or "tag", value.strip()) for key, value in items if value and value.strip())
        tags = {t.text: t for t in await self.resolve_tags(value for _, value in pairs)}
        wanted = {(key, tags[value].id) for key, value in pairs}
        now = utcnow()

        for link in [link for link in host.tag_links if (link.key, link.tag_id) not in wanted]:
            host.tag_links.remove(link)
        present = {(link.key, link.tag_id) for link in host.tag_links}
        for key, value in pairs:
            if (key, tags[value].id) not in present:
                host.tag_links.append(HostTag(key=key, tag=tags[value], created_date=now, updated_date=now))
        await self.repo.update(host)

    # ── remote → sub-remote ─────────────────────

    async def set_sub_remotes(self, remote: Remote, sub_remote_ids: Iterable[int]) -> list[int]:
        """Replace the remote's sub-remotes; every id must exist and differ from the remote."""
        ids = dedupe(sub_remote_ids)
        if remote.id in ids:
            raise ValidationError(f"Remote {remote.id} cannot be its own sub-remote")
        if ids:
            known = {r.id for r in await self.repo.list_where(Remote, Remote.id.in_(ids))}
            missing = [i for i in ids if i not in known]
            if missing:
                raise ValidationError(f"Unknown sub-remote ids: {', '.join(map(str, missing))}")

        await self.repo.delete_where(
            RemoteSubRemote,
            RemoteSubRemote.remote_id == remote.id,
            RemoteSubRemote.sub_remote_id.not_in(ids),
        )
        current = await self.sub_remote_ids([remote.id])
        have = set(current.get(remote.id, []))
        now = utcnow()
        for sub_id in ids:
            if sub_id not in have:
                try:
                    await self.repo.insert(
                        RemoteSubRemote(remote_id=remote.id, sub_remote_id=sub_id, created_date=now, updated_date=now)
                    )
                except ConflictError:
                    log.info("association_exists", remote_id=remote.id, sub_remote_id=sub_id, raced=True)
        return ids

    async def sub_remote_ids(self, remote_ids: Iterable[int]) -> dict[int, list[int]]:
        """``{remote_id: [sub_remote_id, ...]}`` for the given remotes."""
        ids = list(remote_ids)
        if not ids:
            return {}
        rows = await self.repo.list_where(
            RemoteSubRemote, RemoteSubRemote.remote_id.in_(ids), order_by=RemoteSubRemote.id,
        )
        out: dict[int, list[int]] = {}
        for row in rows:
            out.setdefault(row.remote_id, []).append(row.sub_remote_id)
        return out

    # ── cascade on entity deletion ──────────────

    async def remove_host_associations(self, host_id: int) -> int:
        """Drop host↔remote rows of a host about to be deleted (labels cascade with the host)."""
        removed = await self.repo.delete_where(HostRemote, HostRemote.host_id == host_id)
        if removed:
            log.info("host_associations_removed", host_id=host_id, count=removed)
        return removed

    async def remove_remote_associations(self, remote_id: int) -> int:
        removed = await self.repo.delete_where(HostRemote, HostRemote.remote_id == remote_id)
        removed += await self.repo.delete_where(
            RemoteSubRemote,
            or_(RemoteSubRemote.remote_id == remote_id, RemoteSubRemote.sub_remote_id == remote_id),
        )
        if removed:
            log.info("remote_associations_removed", remote_id=remote_id, count=removed)
        return removed

    async def remove_tag_associations(self, tag_id: int) -> int:
        removed = await self.repo.delete_where(TagRemote, TagRemote.tag_id == tag_id)
        removed += await self.repo.delete_where(HostTag, HostTag.tag_id == tag_id)
        if removed:
            log.info("tag_associations_removed", tag_id=tag_id, count=removed)
        return removed
