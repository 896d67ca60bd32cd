from __future__ import annotations

from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel, normalize_tags


class NoteCategory(str, Enum):
    """Category a note can be filed under."""

    WORK = "work"
    PERSONAL = "personal"
    IDEAS = "ideas"
    MEETINGS = "meetings"
    OTHER = "other"


class Note(TimestampedModel):
    """Note domain model."""

    id: UUID = Field(default_factory=uuid4, description="Unique note identifier")

    content: str = Field(min_length=1, max_length=10000, description="Transcribed or typed note text")

    category: NoteCategory | None = Field(default=None, description="Optional category")
    tags: list[str] = Field(default_factory=list, description="Tags for organization")
    is_archived: bool = Field(default=False, description="Whether note is archived")

    audio_url: str | None = Field(default=None, description="Opaque reference to recorded audio")
    formatted_content: str | None = Field(default=None, description="Rendered/formatted content")

    user_id: UUID = Field(description="Owner of the note")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Note content must not be empty")
        return stripped

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return normalize_tags(v or [])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "content": "Call the dentist on Monday and bring the insurance card.",
                    "category": "personal",
                    "tags": ["health", "calls"],
                    "is_archived": False,
                    "user_id": str(uuid4()),
                }
            ]
        }
    }
