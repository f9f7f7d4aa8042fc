"""ORM model unit tests."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from remote_orchestration.models import Host, HostRemote, HostTag, Remote, RemoteModule, RemoteSubRemote, Tag, TagRemote


@pytest.mark.asyncio
class TestHostModel:
    async def test_create_host_sets_timestamps(self, db_session: AsyncSession):
        host = Host(name="shell", environment="prod", tag_links=[])
        db_session.add(host)
        await db_session.flush()
        assert host.id is not None
        assert host.created_date is not None
        assert host.updated_date is not None

    async def test_host_tag_links(self, db_session: AsyncSession):
        tag = Tag(text="checkout")
        host = Host(name="shell", tag_links=[HostTag(key="team", tag=tag)])
        db_session.add(host)
        await db_session.flush()

        result = await db_session.execute(select(HostTag).where(HostTag.host_id == host.id))
        link = result.scalar_one()
        assert link.key == "team"
        assert link.tag.text == "checkout"


@pytest.mark.asyncio
class TestRemoteModel:
    async def test_remote_with_modules(self, db_session: AsyncSession):
        remote = Remote(name="catalog", modules=[RemoteModule(name="./List")], tag_links=[])
        db_session.add(remote)
        await db_session.flush()
        assert remote.modules[0].remote_id == remote.id

    async def test_module_names_unique_per_remote(self, db_session: AsyncSession):
        remote = Remote(name="catalog", modules=[], tag_links=[])
        db_session.add(remote)
        await db_session.flush()
        db_session.add_all([RemoteModule(remote_id=remote.id, name="./A"), RemoteModule(remote_id=remote.id, name="./A")])
        with pytest.raises(IntegrityError):
            await db_session.flush()


@pytest.mark.asyncio
class TestJoinRows:
    async def _pair(self, db_session: AsyncSession) -> tuple[Host, Remote]:
        host = Host(name="h1", tag_links=[])
        remote = Remote(name="r1", modules=[], tag_links=[])
        db_session.add_all([host, remote])
        await db_session.flush()
        return host, remote

    async def test_host_remote_pair_is_unique(self, db_session: AsyncSession):
        host, remote = await self._pair(db_session)
        db_session.add(HostRemote(host_id=host.id, remote_id=remote.id))
        await db_session.flush()
        db_session.add(HostRemote(host_id=host.id, remote_id=remote.id))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_host_remote_requires_existing_rows(self, db_session: AsyncSession):
        db_session.add(HostRemote(host_id=404, remote_id=405))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_tag_remote_pair_is_unique(self, db_session: AsyncSession):
        _, remote = await self._pair(db_session)
        tag = Tag(text="shared")
        db_session.add(tag)
        await db_session.flush()
        db_session.add(TagRemote(remote_id=remote.id, tag_id=tag.id))
        await db_session.flush()
        db_session.add(TagRemote(remote_id=remote.id, tag_id=tag.id))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_remote_cannot_be_its_own_sub_remote(self, db_session: AsyncSession):
        _, remote = await self._pair(db_session)
        db_session.add(RemoteSubRemote(remote_id=remote.id, sub_remote_id=remote.id))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_database_cascade_removes_join_rows(self, db_session: AsyncSession):
        host, remote = await self._pair(db_session)
        db_session.add(HostRemote(host_id=host.id, remote_id=remote.id))
        await db_session.flush()

        await db_session.delete(host)
        await db_session.flush()

        rows = (await db_session.execute(select(HostRemote))).scalars().all()
        assert rows == []
