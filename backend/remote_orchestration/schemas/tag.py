"""Tag Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from remote_orchestration.schemas.common import CamelModel, Label


class TagRequest(CamelModel):
    text: Label


class TagOut(CamelModel):
    id: int
    text: str
    created_date: datetime
    updated_date: datetime
