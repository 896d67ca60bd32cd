from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from voicenotes.core.models.reminder import DueReminder, OutboundEmail


class ReminderRepository(ABC):
    """Storage operations used by the reminder dispatcher.

    Implementations act across all users, so they are expected to run with
    elevated (service role) credentials.
    """

    @abstractmethod
    async def list_due(self, *, window_start: datetime, window_end: datetime) -> Sequence[DueReminder]:  # pragma: no cover
        """Return unsent reminders with window_start <= reminder_date <= window_end."""

    @abstractmethod
    async def claim(self, todo_id: UUID) -> bool:  # pragma: no cover
        """Atomically mark an unsent reminder as sent.

        Returns True only if this call flipped the flag, i.e. exactly one row
        matched `id = todo_id AND reminder_sent = false`.
        """

    @abstractmethod
    async def release(self, todo_id: UUID) -> None:  # pragma: no cover
        """Undo a claim so the reminder can be picked up again."""

    @abstractmethod
    async def enqueue_email(self, email: OutboundEmail) -> None:  # pragma: no cover
        """Insert a row into the outbound email table."""
