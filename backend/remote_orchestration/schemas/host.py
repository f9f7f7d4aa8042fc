"""Host Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from remote_orchestration.schemas.common import CamelModel, EntityId, Label, LabelKey, Name


class HostTagItem(CamelModel):
    """One key/value label on a host."""
    key: LabelKey = "tag"
    value: Label


class HostRequest(CamelModel):
    """Full host body, used for both create and replace."""
    name: Name
    description: str | None = None
    url: str | None = Field(None, max_length=1024)
    key: str | None = Field(None, max_length=256)
    environment: str | None = Field(None, max_length=128)
    repository: str | None = Field(None, max_length=1024)
    contact_name: str | None = Field(None, max_length=256)
    contact_email: str | None = Field(None, max_length=256)
    documentation_url: str | None = Field(None, max_length=1024)
    tags: list[HostTagItem] = []


class HostOut(CamelModel):
    """Host response."""
    id: int
    name: str
    description: str | None = None
    url: str | None = None
    key: str | None = None
    environment: str | None = None
    repository: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    documentation_url: str | None = None
    tags: list[HostTagItem] = []
    created_date: datetime
    updated_date: datetime


class AttachRemoteRequest(CamelModel):
    """Body of ``POST /hosts/{id}/attach``."""
    remote_id: EntityId


class AssignRemoteRequest(CamelModel):
    """Body of ``POST /hosts/assign``."""
    host_id: EntityId
    remote_id: EntityId
