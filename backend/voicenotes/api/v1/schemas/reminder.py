from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import BaseModel, Field


class DispatchRequest(BaseModel):
    """Optional trigger payload; `now` defaults to the server's current UTC time."""

    now: datetime | None = Field(default=None, description="Reference time for the reminder window")


class DispatchResponse(BaseModel):
    message: str


class DispatchErrorResponse(BaseModel):
    error: str
