from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voicenotes.core.models.reminder import DueReminder, OutboundEmail
from voicenotes.core.models.todo import Todo
from voicenotes.core.repositories.implementations.supabase.base import SupabaseRepository
from voicenotes.core.repositories.reminder_repository import ReminderRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID


class SupabaseReminderRepository(SupabaseRepository, ReminderRepository):
    """Reminder storage over `todos`, `profiles` and the `emails` outbox.

    Owner emails come from an embedded `profiles(email)` select, which
    requires a foreign key from `todos.user_id` to `profiles.id`.
    """

    TABLE_NAME = "todos"
    EMAILS_TABLE = "emails"

    async def list_due(self, *, window_start: datetime, window_end: datetime) -> Sequence[DueReminder]:
        resp = await self._run(
            "select",
            lambda: self._table()
            .select("*, profiles(email)")
            .eq("reminder_sent", False)
            .gte("reminder_date", window_start.isoformat())
            .lte("reminder_date", window_end.isoformat())
            .order("reminder_date")
            .execute()
        )
        return [self._row_to_due_reminder(r) for r in resp.data or []]

    async def claim(self, todo_id: UUID) -> bool:
        resp = await self._run(
            "update",
            lambda: self._table()
            .update({"reminder_sent": True})
            .eq("id", str(todo_id))
            .eq("reminder_sent", False)
            .execute()
        )
        return len(resp.data or []) == 1

    async def release(self, todo_id: UUID) -> None:
        await self._run(
            "update",
            lambda: self._table()
            .update({"reminder_sent": False})
            .eq("id", str(todo_id))
            .execute()
        )

    async def enqueue_email(self, email: OutboundEmail) -> None:
        row = email.model_dump()
        await self._run(
            "insert",
            lambda: self._table(self.EMAILS_TABLE)
            .insert(row)
            .execute()
        )

    @classmethod
    def _row_to_due_reminder(cls, row: dict[str, Any]) -> DueReminder:
        profile = row.get("profiles")
        # PostgREST embeds a to-one relation as an object, to-many as a list
        if isinstance(profile, list):
            profile = profile[0] if profile else None
        email = profile.get("email") if isinstance(profile, dict) else None
        todo = Todo.model_validate(cls._model_fields(Todo, row))
        return DueReminder(todo=todo, email=email or None)
