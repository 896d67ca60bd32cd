from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel, ensure_utc


class Priority(str, Enum):
    """Todo priority, ordered low < medium < high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


class Todo(TimestampedModel):
    """Todo domain model."""

    id: UUID = Field(default_factory=uuid4, description="Unique todo identifier")

    title: str = Field(min_length=1, max_length=255, description="Todo title")
    description: str | None = Field(default=None, max_length=10000)

    is_completed: bool = Field(default=False)
    priority: Priority = Field(default=Priority.MEDIUM)

    due_date: datetime | None = Field(default=None, description="When the todo is due")
    reminder_date: datetime | None = Field(default=None, description="When to send a reminder email")
    reminder_sent: bool = Field(default=False, description="Set once the reminder email is queued")

    user_id: UUID = Field(description="Owner of the todo")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Todo title must not be empty")
        return stripped

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("due_date", "reminder_date", "created_at")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)
