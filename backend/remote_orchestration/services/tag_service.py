"""Tag CRUD."""

from __future__ import annotations

from remote_orchestration.errors import ConflictError
from remote_orchestration.models import Tag
from remote_orchestration.models._mixins import utcnow
from remote_orchestration.repository import Repository
from remote_orchestration.schemas.tag import TagRequest
from remote_orchestration.services.association import AssociationService
from remote_orchestration.utils.logging import get_logger

log = get_logger("tags")


class TagService:
    def __init__(self, repo: Repository, associations: AssociationService):
        self.repo = repo
        self.associations = associations

    async def list_tags(self) -> list[Tag]:
        return await self.repo.list_where(Tag, order_by=Tag.text)

    async def get_tag(self, tag_id: int) -> Tag:
        return await self.associations.require_tag(tag_id)

    async def create_tag(self, body: TagRequest) -> Tag:
        text = body.text.strip()
        await self._ensure_free(text)
        now = utcnow()
        tag = await self.repo.insert(Tag(text=text, created_date=now, updated_date=now))
        log.info("tag_created", tag_id=tag.id, text=text)
        return tag

    async def update_tag(self, tag_id: int, body: TagRequest) -> Tag:
        tag = await self.associations.require_tag(tag_id)
        text = body.text.strip()
        if text != tag.text:
            await self._ensure_free(text)
        tag.text = text
        tag.touch()
        await self.repo.update(tag)
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        tag = await self.associations.require_tag(tag_id)
        await self.associations.remove_tag_associations(tag_id)
        await self.repo.delete(tag)
        log.info("tag_deleted", tag_id=tag_id)

    async def _ensure_free(self, text: str) -> None:
        if await self.repo.first_where(Tag, Tag.text == text) is not None:
            raise ConflictError(f"Tag '{text}' already exists")
