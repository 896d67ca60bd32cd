from __future__ import annotations

from pydantic import Field

from .base import AppBaseModel
from .todo import Todo  # noqa: TCH001


class OutboundEmail(AppBaseModel):
    """Row queued in the `emails` outbox table."""

    to: str
    subject: str
    html: str


class DueReminder(AppBaseModel):
    """A todo whose reminder falls in the dispatch window, with its owner's email."""

    todo: Todo
    email: str | None = Field(default=None, description="Owner's registered email")
