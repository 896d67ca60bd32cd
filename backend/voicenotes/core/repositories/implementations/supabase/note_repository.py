from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voicenotes.core.models.note import Note
from voicenotes.core.repositories.implementations.supabase.base import SupabaseRepository
from voicenotes.core.repositories.note_repository import NoteRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseNoteRepository(SupabaseRepository, NoteRepository):
    """Supabase implementation of the NoteRepository.

    Assumes a `notes` table with columns matching the `Note` model fields.
    Ownership is enforced by RLS on the request-scoped client and re-checked
    by the service layer.
    """

    TABLE_NAME = "notes"

    async def create(self, note: Note) -> Note:
        row = self._to_row(note)
        resp = await self._run(
            "insert",
            lambda: self._table()
            .insert(row)
            .execute()
        )
        data = self._first(resp.data)
        return self._row_to_note(data)

    async def get(self, note_id: UUID) -> Note | None:
        resp = await self._run(
            "select",
            lambda: self._table()
            .select("*")
            .eq("id", str(note_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def list(self, *, user_id: UUID) -> Sequence[Note]:
        resp = await self._run(
            "select",
            lambda: self._table()
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [self._row_to_note(i) for i in resp.data or []]

    async def update_fields(self, note_id: UUID, changes: dict) -> Note | None:
        sanitized = self._serialize_changes(changes or {})
        if not sanitized:
            return await self.get(note_id)

        resp = await self._run(
            "update",
            lambda: self._table()
            .update(sanitized)
            .eq("id", str(note_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def delete(self, note_id: UUID) -> bool:
        resp = await self._run(
            "delete",
            lambda: self._table()
            .delete()
            .eq("id", str(note_id))
            .execute()
        )
        return len(resp.data or []) > 0

    @classmethod
    def _row_to_note(cls, row: dict[str, Any]) -> Note:
        normalized = cls._model_fields(Note, row)
        if normalized.get("tags") is None:
            normalized["tags"] = []
        return Note.model_validate(normalized)
