"""Tag CRUD endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from remote_orchestration.api.deps import get_tag_service
from remote_orchestration.config import settings
from remote_orchestration.schemas.common import MAX_ID, HandledResponseModel, MessageOut
from remote_orchestration.schemas.tag import TagOut, TagRequest
from remote_orchestration.services.tag_service import TagService

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
    responses={400: {"model": HandledResponseModel}, 500: {"model": HandledResponseModel}},
)

TagId = Annotated[int, Path(gt=0, le=MAX_ID, description="Tag identifier")]
NOT_FOUND = {404: {"model": HandledResponseModel}}


@router.get("", response_model=list[TagOut])
async def list_tags(service: TagService = Depends(get_tag_service)):
    return [TagOut.model_validate(t) for t in await service.list_tags()]


@router.get("/{tag_id}", response_model=TagOut, responses=NOT_FOUND)
async def get_tag(tag_id: TagId, service: TagService = Depends(get_tag_service)):
    return TagOut.model_validate(await service.get_tag(tag_id))


@router.post("", response_model=TagOut, status_code=201)
async def create_tag(body: TagRequest, response: Response, service: TagService = Depends(get_tag_service)):
    tag = await service.create_tag(body)
    response.headers["Location"] = f"{settings.api_prefix}/tags/{tag.id}"
    return TagOut.model_validate(tag)


@router.put("/{tag_id}", status_code=204, responses=NOT_FOUND)
async def update_tag(body: TagRequest, tag_id: TagId, service: TagService = Depends(get_tag_service)):
    await service.update_tag(tag_id, body)


@router.delete("/{tag_id}", response_model=MessageOut, responses=NOT_FOUND)
async def delete_tag(tag_id: TagId, service: TagService = Depends(get_tag_service)):
    """Delete a tag and detach it from every remote and host."""
    await service.delete_tag(tag_id)
    return MessageOut(message=f"Tag {tag_id} deleted")
