from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def normalize_tags(tags: list[str], *, max_tags: int = 10) -> list[str]:
    """Trim, lowercase and de-duplicate tags, preserving first-seen order."""
    normalized: list[str] = []
    for tag in tags:
        if tag and tag.strip():
            normalized_tag = tag.strip().lower()[:50]
            if normalized_tag not in normalized:
                normalized.append(normalized_tag)
    return normalized[:max_tags]


class AppBaseModel(PydanticBaseModel):
    """Base model for all domain models."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
    )


class TimestampedModel(AppBaseModel):
    """Base model with a creation timestamp."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
