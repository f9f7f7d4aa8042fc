"""Remote CRUD plus the per-remote aggregate counts."""

from __future__ import annotations

from remote_orchestration.models import Remote, RemoteModule, RemoteSubRemote
from remote_orchestration.models._mixins import utcnow
from remote_orchestration.repository import Repository
from remote_orchestration.schemas.remote import RemoteRequest
from remote_orchestration.services.association import AssociationService, dedupe
from remote_orchestration.utils.logging import get_logger

log = get_logger("remotes")

_SCALAR_FIELDS = (
    "name", "storage_type", "configuration", "scope", "url", "active_version",
    "repository", "contact_name", "contact_email", "documentation_url",
)


class RemoteService:
    def __init__(self, repo: Repository, associations: AssociationService):
        self.repo = repo
        self.associations = associations

    async def list_remotes(self) -> list[Remote]:
        return await self.repo.list_where(Remote, order_by=Remote.name)

    async def get_remote(self, remote_id: int) -> Remote:
        return await self.associations.require_remote(remote_id)

    async def create_remote(self, body: RemoteRequest) -> Remote:
        now = utcnow()
        remote = Remote(created_date=now, updated_date=now, modules=[], tag_links=[])
        self._apply(remote, body)
        await self.repo.insert(remote)
        await self._replace_children(remote, body)
        log.info("remote_created", remote_id=remote.id, name=remote.name)
        return remote

    async def update_remote(self, remote_id: int, body: RemoteRequest) -> Remote:
        """Replace every field of the remote, modules / tags / sub-remotes included."""
        remote = await self.associations.require_remote(remote_id)
        self._apply(remote, body)
        remote.touch()
        await self.repo.update(remote)
        await self._replace_children(remote, body)
        log.info("remote_updated", remote_id=remote_id)
        return remote

    async def delete_remote(self, remote_id: int) -> None:
        remote = await self.associations.require_remote(remote_id)
        await self.associations.remove_remote_associations(remote_id)
        await self.repo.delete(remote)
        log.info("remote_deleted", remote_id=remote_id)

    async def sub_remote_ids(self, remotes: list[Remote]) -> dict[int, list[int]]:
        return await self.associations.sub_remote_ids(r.id for r in remotes)

    async def module_counts(self) -> dict[int, int]:
        return await self.repo.count_by(Remote.id, RemoteModule.remote_id)

    async def sub_remote_counts(self) -> dict[int, int]:
        return await self.repo.count_by(Remote.id, RemoteSubRemote.remote_id)

    async def _replace_children(self, remote: Remote, body: RemoteRequest) -> None:
        self._set_modules(remote, body.modules)
        await self.repo.update(remote)
        await self.associations.set_remote_tags(remote, body.tags)
        await self.associations.set_sub_remotes(remote, body.sub_remote_ids)

    @staticmethod
    def _apply(remote: Remote, body: RemoteRequest) -> None:
        for field in _SCALAR_FIELDS:
            setattr(remote, field, getattr(body, field))

    @staticmethod
    def _set_modules(remote: Remote, names: list[str]) -> None:
        wanted = dedupe(n.strip() for n in names if n and n.strip())
        for module in [m for m in remote.modules if m.name not in wanted]:
            remote.modules.remove(module)
        present = {m.name for m in remote.modules}
        now = utcnow()
        for name in wanted:
            if name not in present:
                remote.modules.append(RemoteModule(name=name, created_date=now, updated_date=now))
