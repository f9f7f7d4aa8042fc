"""Shared Pydantic building blocks."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

# Largest value an INTEGER primary key can hold on PostgreSQL
MAX_ID = 2_147_483_647

EntityId = Annotated[int, Field(gt=0, le=MAX_ID)]

# Non-blank text; surrounding whitespace is removed before the length check
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=256)]
Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]
LabelKey = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


# JSON bodies are camelCase; snake_case is still accepted on input
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CamelModel(BaseModel):
    model_config = CAMEL_CONFIG


class HandledResponseModel(CamelModel):
    """Uniform error body."""
    message: str
    type: str
    errors: list[dict] | None = None


class MessageOut(CamelModel):
    message: str


class RemoteCountOut(CamelModel):
    """Per-remote aggregate (modules, sub-remotes)."""
    remote_id: int
    count: int
