"""Pydantic schemas for Post API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a post.

    Presence is checked by the post service so blank fields produce
    field-level messages; unknown keys such as ``owner_id`` are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(None, description="Post title (required, non-blank)")
    body: str | None = Field(None, description="Post body (required, non-blank)")


class PostUpdate(BaseModel):
    """Schema for a partial post update. Only fields sent are applied."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    body: str | None = None


class PostResponse(BaseModel):
    """Schema for post response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    owner_id: UUID
    created_at: datetime
    updated_at: datetime
