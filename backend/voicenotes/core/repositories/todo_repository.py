from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from voicenotes.core.models.todo import Todo


class TodoRepository(ABC):
    """Abstract repository interface for todos."""

    @abstractmethod
    async def create(self, todo: Todo) -> Todo:  # pragma: no cover - interface only
        """Persist a new todo and return the stored entity."""

    @abstractmethod
    async def get(self, todo_id: UUID) -> Todo | None:  # pragma: no cover
        """Fetch a todo by id or return None if not found."""

    @abstractmethod
    async def list(self, *, user_id: UUID) -> Sequence[Todo]:  # pragma: no cover
        """Return all todos of a user, newest first."""

    @abstractmethod
    async def update_fields(self, todo_id: UUID, changes: dict) -> Todo | None:  # pragma: no cover
        """Partially update fields on a todo and return the updated entity, or None if missing."""

    @abstractmethod
    async def delete(self, todo_id: UUID) -> bool:  # pragma: no cover
        """Delete a todo by id. Return True if a row was removed, False otherwise."""
