"""Host CRUD: full-replace updates, association writes go through AssociationService."""

from __future__ import annotations

from remote_orchestration.models import Host
from remote_orchestration.models._mixins import utcnow
from remote_orchestration.repository import Repository
from remote_orchestration.schemas.host import HostRequest
from remote_orchestration.services.association import AssociationService
from remote_orchestration.utils.logging import get_logger

log = get_logger("hosts")

_SCALAR_FIELDS = (
    "name", "description", "url", "key", "environment",
    "repository", "contact_name", "contact_email", "documentation_url",
)


class HostService:
    def __init__(self, repo: Repository, associations: AssociationService):
        self.repo = repo
        self.associations = associations

    async def list_hosts(self) -> list[Host]:
        return await self.repo.list_where(Host, order_by=Host.name)

    async def get_host(self, host_id: int) -> Host:
        return await self.associations.require_host(host_id)

    async def create_host(self, body: HostRequest) -> Host:
        now = utcnow()
        host = Host(created_date=now, updated_date=now, tag_links=[])
        self._apply(host, body)
        await self.repo.insert(host)
        await self.associations.set_host_tags(host, ((t.key, t.value) for t in body.tags))
        log.info("host_created", host_id=host.id, name=host.name, environment=host.environment)
        return host

    async def update_host(self, host_id: int, body: HostRequest) -> Host:
        """Replace every field of the host, tags included."""
        host = await self.associations.require_host(host_id)
        self._apply(host, body)
        host.touch()
        await self.repo.update(host)
        await self.associations.set_host_tags(host, ((t.key, t.value) for t in body.tags))
        log.info("host_updated", host_id=host_id)
        return host

    async def delete_host(self, host_id: int) -> None:
        host = await self.associations.require_host(host_id)
        await self.associations.remove_host_associations(host_id)
        await self.repo.delete(host)
        log.info("host_deleted", host_id=host_id)

    @staticmethod
    def _apply(host: Host, body: HostRequest) -> None:
        for field in _SCALAR_FIELDS:
            setattr(host, field, getattr(body, field))
