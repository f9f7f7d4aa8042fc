"""Shared test fixtures for the backend test suite."""

from __future__ import annotations

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import remote_orchestration.models  # noqa: F401
from remote_orchestration.client import OrchestrationClient
from remote_orchestration.database import Base, configure_sqlite, get_db
from remote_orchestration.main import app
from remote_orchestration.repository import Repository
from remote_orchestration.services.association import AssociationService
from remote_orchestration.services.host_service import HostService
from remote_orchestration.services.remote_service import RemoteService
from remote_orchestration.services.tag_service import TagService


# ── In-memory SQLite for testing ────────────────
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Fresh schema per test."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncSession:
    """Provide a test database session (service-level tests only)."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def repo(db_session: AsyncSession) -> Repository:
    return Repository(db_session)


@pytest_asyncio.fixture
async def associations(repo: Repository) -> AssociationService:
    return AssociationService(repo)


@pytest_asyncio.fixture
async def host_service(repo: Repository, associations: AssociationService) -> HostService:
    return HostService(repo, associations)


@pytest_asyncio.fixture
async def remote_service(repo: Repository, associations: AssociationService) -> RemoteService:
    return RemoteService(repo, associations)


@pytest_asyncio.fixture
async def tag_service(repo: Repository, associations: AssociationService) -> TagService:
    return TagService(repo, associations)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncClient:
    """HTTP client against the app; each request gets its own committed session."""

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api(client: AsyncClient) -> OrchestrationClient:
    """Typed client data layer wired to the same app."""
    async with OrchestrationClient("http://test/api", transport=ASGITransport(app=app)) as oc:
        yield oc
