from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from voicenotes.core.models.todo import Todo
from voicenotes.core.services.filtering import TodoFilter, TodoSortKey, filter_todos, sort_todos
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from voicenotes.api.v1.schemas.todo import TodoCreate, TodoUpdate
    from voicenotes.core.repositories.todo_repository import TodoRepository

logger = get_logger(__name__)


class TodoService:
    """Service for managing todos with user-scoped access."""

    _UPDATABLE_FIELDS = {"title", "description", "is_completed", "priority", "due_date", "reminder_date"}
    _NON_NULLABLE_FIELDS = {"title", "is_completed", "priority"}

    def __init__(self, repo: TodoRepository) -> None:
        self._repo = repo

    async def create_todo(self, create_dto: TodoCreate, user_id: UUID) -> Todo:
        """Create a todo for a user; an empty title is rejected before any write."""
        title = (create_dto.title or "").strip()
        if not title:
            raise ValueError("Todo title must not be empty")

        todo = Todo(
            id=uuid4(),
            title=title,
            description=create_dto.description,
            priority=create_dto.priority,
            due_date=create_dto.due_date,
            reminder_date=create_dto.reminder_date,
            user_id=user_id,
        )
        created = await self._repo.create(todo)
        logger.info("Created todo %s", created.id, extra={"user_id": str(user_id)})
        return created

    async def get_todo(self, todo_id: str | UUID, user_id: UUID) -> Todo | None:
        """Return todo if it exists and belongs to the user; otherwise None."""
        try:
            todo_uuid = UUID(str(todo_id))
        except ValueError:
            return None
        todo = await self._repo.get(todo_uuid)
        if todo and todo.user_id == user_id:
            return todo
        return None

    async def list_todos(
        self,
        user_id: UUID,
        criteria: TodoFilter | None = None,
        sort: TodoSortKey = TodoSortKey.DUE_DATE,
    ) -> list[Todo]:
        todos = await self._repo.list(user_id=user_id)
        return sort_todos(filter_todos(todos, criteria or TodoFilter()), sort)

    async def update_todo(self, todo_id: str | UUID, update_dto: TodoUpdate, user_id: UUID) -> Todo | None:
        """Apply a partial update to a user's todo.

        Moving the reminder to a different time re-arms it (reminder_sent is
        reset) so the new reminder can be dispatched.
        """
        existing = await self.get_todo(todo_id, user_id)
        if not existing:
            return None

        changes = {
            key: value
            for key, value in update_dto.model_dump(exclude_unset=True).items()
            if key in self._UPDATABLE_FIELDS
        }
        for key in self._NON_NULLABLE_FIELDS & changes.keys():
            if changes[key] is None:
                raise ValueError(f"{key} cannot be cleared")
        if "title" in changes:
            title = changes["title"].strip()
            if not title:
                raise ValueError("Todo title must not be empty")
            changes["title"] = title
        if "reminder_date" in changes and changes["reminder_date"] != existing.reminder_date:
            changes["reminder_sent"] = False

        return await self._repo.update_fields(existing.id, changes)

    async def toggle_completed(self, todo_id: str | UUID, user_id: UUID) -> Todo | None:
        """Flip the completion flag from its stored value."""
        existing = await self.get_todo(todo_id, user_id)
        if not existing:
            return None
        return await self._repo.update_fields(existing.id, {"is_completed": not existing.is_completed})

    async def delete_todo(self, todo_id: str | UUID, user_id: UUID) -> bool:
        """Delete a user's todo if it exists and belongs to them."""
        todo = await self.get_todo(todo_id, user_id)
        if not todo:
            return False
        deleted = await self._repo.delete(todo.id)
        if deleted:
            logger.info("Deleted todo %s", todo.id, extra={"user_id": str(user_id)})
        return deleted
