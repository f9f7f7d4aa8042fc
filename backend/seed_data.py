"""
Seed data script — populates the database with default tags
and (optionally) a demo host / remote graph for development.

Usage:
    python seed_data.py                   # tags only
    python seed_data.py --demo            # tags + demo hosts and remotes
    python seed_data.py --create-schema   # create tables first (no Alembic)
"""

from __future__ import annotations

import asyncio
import sys

from remote_orchestration.database import Base, async_session, engine
from remote_orchestration.repository import Repository
from remote_orchestration.schemas.host import HostRequest, HostTagItem
from remote_orchestration.schemas.remote import RemoteRequest
from remote_orchestration.services.association import AssociationService
from remote_orchestration.services.host_service import HostService
from remote_orchestration.services.remote_service import RemoteService


DEFAULT_TAGS = ["shell", "checkout", "catalog", "account", "shared", "experimental", "deprecated"]


async def create_schema():
    import remote_orchestration.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Schema created.")


async def seed_tags():
    """Insert default tags if they don't exist."""
    async with async_session() as db:
        associations = AssociationService(Repository(db))
        tags = await associations.resolve_tags(DEFAULT_TAGS)
        await db.commit()
    for tag in tags:
        print(f"  + Tag: {tag.text}")
    print("Tags seeded.")


async def seed_demo_data():
    """Insert two hosts and a handful of remotes attached to them."""
    async with async_session() as db:
        repo = Repository(db)
        associations = AssociationService(repo)
        hosts = HostService(repo, associations)
        remotes = RemoteService(repo, associations)

        shared = await remotes.create_remote(RemoteRequest(
            name="shared-ui", storage_type="s3", scope="shared_ui",
            url="https://cdn.example.com/shared-ui/remoteEntry.js",
            modules=["./Button", "./Modal", "./Theme"], tags=["shared"],
        ))
        checkout = await remotes.create_remote(RemoteRequest(
            name="checkout", storage_type="s3", scope="checkout",
            url="https://cdn.example.com/checkout/remoteEntry.js", active_version="1.4.0",
            modules=["./Cart", "./Payment"], tags=["checkout"], sub_remote_ids=[shared.id],
        ))
        catalog = await remotes.create_remote(RemoteRequest(
            name="catalog", storage_type="azure-blob", scope="catalog",
            url="https://cdn.example.com/catalog/remoteEntry.js",
            modules=["./ProductList", "./ProductDetail"], tags=["catalog"], sub_remote_ids=[shared.id],
        ))

        demo_hosts = [
            ("storefront-prod", "prod", [checkout, catalog, shared]),
            ("storefront-staging", "staging", [checkout, catalog, shared]),
            ("backoffice-prod", "prod", [shared]),
        ]
        for name, environment, attached in demo_hosts:
            host = await hosts.create_host(HostRequest(
                name=name, environment=environment,
                url=f"https://{name}.example.com",
                tags=[HostTagItem(key="team", value="shell")],
            ))
            for remote in attached:
                await associations.attach_remote_to_host(host.id, remote.id)
            print(f"  + Host: {name} ({environment}) with {len(attached)} remotes")

        await db.commit()
    print("Demo data seeded.")


async def main():
    print("Seeding database...")
    if "--create-schema" in sys.argv:
        await create_schema()
    await seed_tags()
    if "--demo" in sys.argv:
        await seed_demo_data()
    await engine.dispose()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
