"""Pydantic models for the profile tables and the profile-creation form.

``content_creators`` and ``product_creators`` share one record shape: a
stable ``slug``, a display ``title`` and a ``metadata`` bag whose keys depend
on the profile kind.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ImageRef(BaseModel):
    """Public URL of an uploaded image."""
    url: str
    imgix_url: str


class OptionValue(BaseModel):
    """Enumerated field stored as its key plus a display label."""
    key: str
    value: str


class MediaUpload(BaseModel):
    """A file pulled out of the multipart form, already read into memory."""
    field_name: str
    filename: str
    content_type: str = "application/octet-stream"
    content: bytes


class ProfileSubmission(BaseModel):
    """Profile-creation form split into text fields and file uploads."""
    fields: dict[str, str] = Field(default_factory=dict)
    files: dict[str, MediaUpload] = Field(default_factory=dict)

    def text(self, name: str) -> str:
        return (self.fields.get(name) or "").strip()


class ProfileCreate(BaseModel):
    """Payload for inserting a profile record."""
    slug: str
    title: str
    metadata: dict[str, Any]


class Profile(BaseModel):
    """Full profile record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class ProfileCreateResponse(BaseModel):
    success: bool = True
    profile: Profile
    slug: str


class Category(BaseModel):
    """Content category used by creator and brand profiles."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    metadata: dict[str, Any] = Field(default_factory=dict)
