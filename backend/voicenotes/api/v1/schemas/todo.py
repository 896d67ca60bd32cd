from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from voicenotes.core.models.base import AppBaseModel, ensure_utc
from voicenotes.core.models.todo import Priority


class TodoCreate(AppBaseModel):
    title: str = Field(max_length=255, description="Todo title")
    description: str | None = Field(default=None, max_length=10000)
    priority: Priority = Field(default=Priority.MEDIUM)
    due_date: datetime | None = None
    reminder_date: datetime | None = Field(default=None, description="When to email a reminder")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Todo title must not be empty")
        return stripped

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class TodoUpdate(AppBaseModel):
    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    is_completed: bool | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    reminder_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        stripped = v.strip()
        if not stripped:
            raise ValueError("Todo title must not be empty")
        return stripped

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class TodoRead(AppBaseModel):
    id: UUID
    title: str
    description: str | None
    is_completed: bool
    priority: Priority
    due_date: datetime | None
    reminder_date: datetime | None
    reminder_sent: bool
    user_id: UUID
    created_at: datetime
