"""Remote Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, computed_field

from remote_orchestration.schemas.common import CamelModel, EntityId, Name


class RemoteRequest(CamelModel):
    """Full remote body, used for both create and replace."""
    name: Name
    storage_type: str = Field("", max_length=64)
    configuration: str = ""
    scope: str | None = Field(None, max_length=256)
    url: str | None = Field(None, max_length=1024)
    active_version: str | None = Field(None, max_length=128)
    repository: str | None = Field(None, max_length=1024)
    contact_name: str | None = Field(None, max_length=256)
    contact_email: str | None = Field(None, max_length=256)
    documentation_url: str | None = Field(None, max_length=1024)
    modules: list[str] = []
    tags: list[str] = []
    sub_remote_ids: list[EntityId] = []


class RemoteModuleOut(CamelModel):
    id: int
    name: str
    created_date: datetime
    updated_date: datetime


class RemoteOut(CamelModel):
    """Remote response."""
    id: int
    name: str
    storage_type: str = ""
    configuration: str = ""
    scope: str | None = None
    url: str | None = None
    active_version: str | None = None
    repository: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    documentation_url: str | None = None
    modules: list[RemoteModuleOut] = []
    tags: list[str] = []
    sub_remote_ids: list[int] = []
    created_date: datetime
    updated_date: datetime

    @computed_field(alias="remoteId")
    @property
    def remote_id(self) -> int:
        return self.id
