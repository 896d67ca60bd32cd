from __future__ import annotations

from pydantic import Field

from voicenotes.core.models.base import AppBaseModel
from voicenotes.core.models.note import NoteCategory  # noqa: TCH001


class NoteEnrichmentResult(AppBaseModel):
    """Validated tag/category suggestion for a voice note."""

    tags: list[str] = Field(
        description="List of tags for the note, maximum 5 tags",
        max_length=5,
    )
    category: NoteCategory | None = Field(
        default=None,
        description="Best matching category, or null when none fits",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tags": ["standup", "project"],
                    "category": "meetings",
                }
            ]
        }
    }
