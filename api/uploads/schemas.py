"""
Upload and commit API schemas.

Required fields are optional here on purpose: the service reports every
missing one in a single 400.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SignUploadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trip_id: UUID | None = Field(default=None, alias="tripId")
    kind: str | None = None
    filename: str | None = Field(default=None, max_length=1024)
    content_type: str | None = Field(default=None, alias="contentType")
    size_bytes: int | None = Field(default=None, alias="sizeBytes", ge=0)


class MediaCommitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trip_id: UUID | None = Field(default=None, alias="tripId")
    moment_id: UUID | None = Field(default=None, alias="momentId")
    type: str | None = None
    storage_key: str | None = Field(default=None, alias="storageKey")
    cdn_url: str | None = Field(default=None, alias="cdnUrl")
    size_bytes: int | None = Field(default=None, alias="sizeBytes", ge=0)


class AttachmentCommitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trip_id: UUID | None = Field(default=None, alias="tripId")
    moment_id: UUID | None = Field(default=None, alias="momentId")
    type: str | None = None
    title: str | None = None
    storage_key: str | None = Field(default=None, alias="storageKey")
    cdn_url: str | None = Field(default=None, alias="cdnUrl")
    size_bytes: int | None = Field(default=None, alias="sizeBytes", ge=0)
    url: str | None = None
