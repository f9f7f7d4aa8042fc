"""Host CRUD, environment lookup and host↔remote attachment endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from remote_orchestration.api.deps import get_associations, get_host_service, get_remote_service
from remote_orchestration.api.serializers import host_out, remote_out
from remote_orchestration.config import settings
from remote_orchestration.errors import NotFoundError, ValidationError
from remote_orchestration.schemas.common import MAX_ID, HandledResponseModel, MessageOut
from remote_orchestration.schemas.host import AssignRemoteRequest, AttachRemoteRequest, HostOut, HostRequest
from remote_orchestration.schemas.remote import RemoteOut
from remote_orchestration.services.association import AssociationService
from remote_orchestration.services.host_service import HostService
from remote_orchestration.services.remote_service import RemoteService

router = APIRouter(
    prefix="/hosts",
    tags=["hosts"],
    responses={400: {"model": HandledResponseModel}, 500: {"model": HandledResponseModel}},
)

HostId = Annotated[int, Path(gt=0, le=MAX_ID, description="Host identifier")]
NOT_FOUND = {404: {"model": HandledResponseModel}}


@router.get("", response_model=list[HostOut])
async def list_hosts(service: HostService = Depends(get_host_service)):
    """List all registered hosts."""
    return [host_out(h) for h in await service.list_hosts()]


@router.get("/environment/{environment:path}", response_model=list[HostOut])
async def list_hosts_by_environment(
    environment: Annotated[str, Path(min_length=1, max_length=128)],
    associations: AssociationService = Depends(get_associations),
):
    """Hosts whose environment label equals *environment*."""
    hosts = await associations.list_hosts_by_environment(
        environment, case_sensitive=settings.environment_match_case_sensitive,
    )
    return [host_out(h) for h in hosts]


@router.post("/assign", response_model=MessageOut)
async def assign_remote_to_host(
    body: AssignRemoteRequest,
    associations: AssociationService = Depends(get_associations),
):
    """Attach a remote to a host, both ids in the body."""
    await _attach(associations, body.host_id, body.remote_id)
    return MessageOut(message=f"Remote {body.remote_id} assigned to host {body.host_id}")


@router.get("/{host_id}", response_model=HostOut, responses=NOT_FOUND)
async def get_host(host_id: HostId, service: HostService = Depends(get_host_service)):
    return host_out(await service.get_host(host_id))


@router.post("", response_model=HostOut, status_code=201)
async def create_host(body: HostRequest, response: Response, service: HostService = Depends(get_host_service)):
    host = await service.create_host(body)
    response.headers["Location"] = f"{settings.api_prefix}/hosts/{host.id}"
    return host_out(host)


@router.put("/{host_id}", status_code=204, responses=NOT_FOUND)
async def update_host(body: HostRequest, host_id: HostId, service: HostService = Depends(get_host_service)):
    """Replace a host (full update, tags included)."""
    await service.update_host(host_id, body)


@router.delete("/{host_id}", response_model=MessageOut, responses=NOT_FOUND)
async def delete_host(host_id: HostId, service: HostService = Depends(get_host_service)):
    """Delete a host and every association row that references it."""
    await service.delete_host(host_id)
    return MessageOut(message=f"Host {host_id} deleted")


# ── Remotes attached to a host ──────────────────

@router.get("/{host_id}/remotes", response_model=list[RemoteOut], responses=NOT_FOUND)
async def list_host_remotes(
    host_id: HostId,
    associations: AssociationService = Depends(get_associations),
    remotes: RemoteService = Depends(get_remote_service),
):
    attached = list(await associations.list_remotes_for_host(host_id))
    subs = await remotes.sub_remote_ids(attached)
    return [remote_out(r, subs.get(r.id)) for r in attached]


@router.post("/{host_id}/attach", status_code=204)
async def attach_remote_to_host(
    body: AttachRemoteRequest,
    host_id: HostId,
    associations: AssociationService = Depends(get_associations),
):
    """Attach a remote to the host in the path."""
    await _attach(associations, host_id, body.remote_id)


@router.delete("/{host_id}/remotes/{remote_id}", status_code=204, responses=NOT_FOUND)
async def detach_remote_from_host(
    host_id: HostId,
    remote_id: Annotated[int, Path(gt=0, le=MAX_ID)],
    associations: AssociationService = Depends(get_associations),
):
    """Detach a remote; detaching a remote that is not attached is not an error."""
    await associations.detach_remote_from_host(host_id, remote_id)


async def _attach(associations: AssociationService, host_id: int, remote_id: int) -> None:
    # Both attach routes answer unknown ids with 400, not 404
    try:
        await associations.attach_remote_to_host(host_id, remote_id)
    except NotFoundError as exc:
        raise ValidationError(exc.message) from exc
