"""Remote CRUD, remote↔tag attachment and per-remote counts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from remote_orchestration.api.deps import get_associations, get_remote_service
from remote_orchestration.api.serializers import remote_out
from remote_orchestration.config import settings
from remote_orchestration.schemas.common import MAX_ID, HandledResponseModel, MessageOut, RemoteCountOut
from remote_orchestration.schemas.remote import RemoteOut, RemoteRequest
from remote_orchestration.services.association import AssociationService
from remote_orchestration.services.remote_service import RemoteService

router = APIRouter(
    prefix="/remotes",
    tags=["remotes"],
    responses={400: {"model": HandledResponseModel}, 500: {"model": HandledResponseModel}},
)

RemoteId = Annotated[int, Path(gt=0, le=MAX_ID, description="Remote identifier")]
NOT_FOUND = {404: {"model": HandledResponseModel}}


@router.get("", response_model=list[RemoteOut])
async def list_remotes(service: RemoteService = Depends(get_remote_service)):
    remotes = await service.list_remotes()
    subs = await service.sub_remote_ids(remotes)
    return [remote_out(r, subs.get(r.id)) for r in remotes]


@router.get("/module-counts", response_model=list[RemoteCountOut])
async def remote_module_counts(service: RemoteService = Depends(get_remote_service)):
    """Number of exposed modules per remote."""
    counts = await service.module_counts()
    return [RemoteCountOut(remote_id=rid, count=n) for rid, n in sorted(counts.items())]


@router.get("/sub-remote-counts", response_model=list[RemoteCountOut])
async def remote_sub_remote_counts(service: RemoteService = Depends(get_remote_service)):
    """Number of sub-remotes per remote."""
    counts = await service.sub_remote_counts()
    return [RemoteCountOut(remote_id=rid, count=n) for rid, n in sorted(counts.items())]


@router.get("/{remote_id}", response_model=RemoteOut, responses=NOT_FOUND)
async def get_remote(remote_id: RemoteId, service: RemoteService = Depends(get_remote_service)):
    remote = await service.get_remote(remote_id)
    subs = await service.sub_remote_ids([remote])
    return remote_out(remote, subs.get(remote.id))


@router.post("", response_model=RemoteOut, status_code=201)
async def create_remote(body: RemoteRequest, response: Response, service: RemoteService = Depends(get_remote_service)):
    remote = await service.create_remote(body)
    subs = await service.sub_remote_ids([remote])
    response.headers["Location"] = f"{settings.api_prefix}/remotes/{remote.id}"
    return remote_out(remote, subs.get(remote.id))


@router.put("/{remote_id}", status_code=204, responses=NOT_FOUND)
async def update_remote(body: RemoteRequest, remote_id: RemoteId,
                        service: RemoteService = Depends(get_remote_service)):
    """Replace a remote (full update, modules / tags / sub-remotes included)."""
    await service.update_remote(remote_id, body)


@router.delete("/{remote_id}", response_model=MessageOut, responses=NOT_FOUND)
async def delete_remote(remote_id: RemoteId, service: RemoteService = Depends(get_remote_service)):
    await service.delete_remote(remote_id)
    return MessageOut(message=f"Remote {remote_id} deleted")


# ── Tagging ─────────────────────────────────────

@router.post("/{remote_id}/tags/{tag_id}", status_code=204, responses=NOT_FOUND)
async def attach_tag_to_remote(
    remote_id: RemoteId,
    tag_id: Annotated[int, Path(gt=0, le=MAX_ID)],
    associations: AssociationService = Depends(get_associations),
):
    await associations.attach_tag_to_remote(remote_id, tag_id)


@router.delete("/{remote_id}/tags/{tag_id}", status_code=204, responses=NOT_FOUND)
async def detach_tag_from_remote(
    remote_id: RemoteId,
    tag_id: Annotated[int, Path(gt=0, le=MAX_ID)],
    associations: AssociationService = Depends(get_associations),
):
    await associations.detach_tag_from_remote(remote_id, tag_id)
