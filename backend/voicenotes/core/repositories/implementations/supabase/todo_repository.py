from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voicenotes.core.models.todo import Todo
from voicenotes.core.repositories.implementations.supabase.base import SupabaseRepository
from voicenotes.core.repositories.todo_repository import TodoRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseTodoRepository(SupabaseRepository, TodoRepository):
    """Supabase implementation of the TodoRepository over the `todos` table."""

    TABLE_NAME = "todos"

    async def create(self, todo: Todo) -> Todo:
        row = self._to_row(todo)
        resp = await self._run(
            "insert",
            lambda: self._table()
            .insert(row)
            .execute()
        )
        return self._row_to_todo(self._first(resp.data))

    async def get(self, todo_id: UUID) -> Todo | None:
        resp = await self._run(
            "select",
            lambda: self._table()
            .select("*")
            .eq("id", str(todo_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_todo(items[0])

    async def list(self, *, user_id: UUID) -> Sequence[Todo]:
        resp = await self._run(
            "select",
            lambda: self._table()
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [self._row_to_todo(i) for i in resp.data or []]

    async def update_fields(self, todo_id: UUID, changes: dict) -> Todo | None:
        sanitized = self._serialize_changes(changes or {})
        if not sanitized:
            return await self.get(todo_id)

        resp = await self._run(
            "update",
            lambda: self._table()
            .update(sanitized)
            .eq("id", str(todo_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_todo(items[0])

    async def delete(self, todo_id: UUID) -> bool:
        resp = await self._run(
            "delete",
            lambda: self._table()
            .delete()
            .eq("id", str(todo_id))
            .execute()
        )
        return len(resp.data or []) > 0

    @classmethod
    def _row_to_todo(cls, row: dict[str, Any]) -> Todo:
        return Todo.model_validate(cls._model_fields(Todo, row))
