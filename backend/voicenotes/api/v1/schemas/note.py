from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from voicenotes.core.models.base import AppBaseModel, normalize_tags
from voicenotes.core.models.note import NoteCategory  # noqa: TCH001


class NoteCreate(AppBaseModel):
    content: str = Field(max_length=10000, description="Note text, usually a speech transcript")
    category: NoteCategory | None = Field(default=None, description="Optional category")
    tags: list[str] = Field(default_factory=list, description="Tags for organization")
    is_archived: bool = Field(default=False, description="Whether note is archived")
    audio_url: str | None = Field(default=None, max_length=2048)
    formatted_content: str | None = Field(default=None, max_length=20000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Note content must not be empty")
        return stripped

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class NoteUpdate(AppBaseModel):
    content: str | None = Field(default=None, max_length=10000)
    category: NoteCategory | None = None
    tags: list[str] | None = None
    is_archived: bool | None = None
    audio_url: str | None = Field(default=None, max_length=2048)
    formatted_content: str | None = Field(default=None, max_length=20000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str | None) -> str | None:
        if v is None:
            return v
        stripped = v.strip()
        if not stripped:
            raise ValueError("Note content must not be empty")
        return stripped

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return normalize_tags(v)


class NoteRead(AppBaseModel):
    id: UUID
    content: str
    category: NoteCategory | None
    tags: list[str]
    is_archived: bool
    audio_url: str | None
    formatted_content: str | None
    user_id: UUID
    created_at: datetime
