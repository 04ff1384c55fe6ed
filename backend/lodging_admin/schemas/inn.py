"""Inn schemas for CRUD operations."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class InnBase(BaseModel):
    """Shared inn fields."""

    name: str = Field(min_length=1, max_length=255)
    tag: str | None = Field(default=None, max_length=64)
    address: str | None = Field(default=None, max_length=512)
    map_url: str | None = Field(default=None, max_length=1024)


class InnCreate(InnBase):
    """Payload for registering an inn."""


class InnUpdate(BaseModel):
    """Mutable inn fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    tag: str | None = Field(default=None, max_length=64)
    address: str | None = Field(default=None, max_length=512)
    map_url: str | None = Field(default=None, max_length=1024)


class InnRead(InnBase):
    """Serialized inn response."""

    id: uuid.UUID
    display_name: str | None = None
    label: str

    model_config = ConfigDict(from_attributes=True)
