"""FastAPI dependencies wiring a request's session into the services."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from remote_orchestration.database import get_db
from remote_orchestration.repository import Repository
from remote_orchestration.services.association import AssociationService
from remote_orchestration.services.host_service import HostService
from remote_orchestration.services.remote_service import RemoteService
from remote_orchestration.services.tag_service import TagService


def get_repository(db: AsyncSession = Depends(get_db)) -> Repository:
    return Repository(db)


def get_associations(repo: Repository = Depends(get_repository)) -> AssociationService:
    return AssociationService(repo)


def get_host_service(
    repo: Repository = Depends(get_repository),
    associations: AssociationService = Depends(get_associations),
) -> HostService:
    return HostService(repo, associations)


def get_remote_service(
    repo: Repository = Depends(get_repository),
    associations: AssociationService = Depends(get_associations),
) -> RemoteService:
    return RemoteService(repo, associations)


def get_tag_service(
    repo: Repository = Depends(get_repository),
    associations: AssociationService = Depends(get_associations),
) -> TagService:
    return TagService(repo, associations)
