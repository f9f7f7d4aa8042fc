"""ORM → response schema conversion shared by the routers."""

from __future__ import annotations

from remote_orchestration.models import Host, Remote
from remote_orchestration.schemas.host import HostOut, HostTagItem
from remote_orchestration.schemas.remote import RemoteModuleOut, RemoteOut


def host_out(host: Host) -> HostOut:
    return HostOut(
        id=host.id,
        name=host.name,
        description=host.description,
        url=host.url,
        key=host.key,
        environment=host.environment,
        repository=host.repository,
        contact_name=host.contact_name,
        contact_email=host.contact_email,
        documentation_url=host.documentation_url,
        tags=[HostTagItem(key=link.key, value=link.tag.text) for link in host.tag_links],
        created_date=host.created_date,
        updated_date=host.updated_date,
    )


def remote_out(remote: Remote, sub_remote_ids: list[int] | None = None) -> RemoteOut:
    return RemoteOut(
        id=remote.id,
        name=remote.name,
        storage_type=remote.storage_type,
        configuration=remote.configuration,
        scope=remote.scope,
        url=remote.url,
        active_version=remote.active_version,
        repository=remote.repository,
        contact_name=remote.contact_name,
        contact_email=remote.contact_email,
        documentation_url=remote.documentation_url,
        modules=[RemoteModuleOut.model_validate(m) for m in remote.modules],
        tags=[link.tag.text for link in remote.tag_links],
        sub_remote_ids=sub_remote_ids or [],
        created_date=remote.created_date,
        updated_date=remote.updated_date,
    )
