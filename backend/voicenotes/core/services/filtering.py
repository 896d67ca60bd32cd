"""Pure list filtering and sorting for notes and todos.

Each function works on a fully fetched list and returns a new list; nothing
is cached or indexed between calls.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from voicenotes.core.models.base import AppBaseModel
from voicenotes.core.models.note import NoteCategory  # noqa: TCH001
from voicenotes.core.models.todo import Priority  # noqa: TCH001

if TYPE_CHECKING:
    from collections.abc import Iterable

    from voicenotes.core.models.note import Note
    from voicenotes.core.models.todo import Todo


_NO_DATE = datetime.min.replace(tzinfo=UTC)


class NoteFilter(AppBaseModel):
    """Active note predicates; None (or blank search) disables a predicate."""

    category: NoteCategory | None = None
    search: str | None = None
    is_archived: bool | None = False


class TodoFilter(AppBaseModel):
    """Active todo predicates; None (or blank search) disables a predicate."""

    is_completed: bool | None = None
    priority: Priority | None = None
    search: str | None = None


class TodoSortKey(str, Enum):
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"


def _needle(search: str | None) -> str:
    return (search or "").strip().lower()


def note_matches(note: Note, criteria: NoteFilter) -> bool:
    if criteria.is_archived is not None and note.is_archived != criteria.is_archived:
        return False
    if criteria.category is not None and note.category != criteria.category:
        return False
    needle = _needle(criteria.search)
    if needle:
        in_content = needle in note.content.lower()
        in_tags = any(needle in tag.lower() for tag in note.tags)
        if not (in_content or in_tags):
            return False
    return True


def filter_notes(notes: Iterable[Note], criteria: NoteFilter) -> list[Note]:
    return [note for note in notes if note_matches(note, criteria)]


def todo_matches(todo: Todo, criteria: TodoFilter) -> bool:
    if criteria.is_completed is not None and todo.is_completed != criteria.is_completed:
        return False
    if criteria.priority is not None and todo.priority != criteria.priority:
        return False
    needle = _needle(criteria.search)
    if needle:
        haystack = f"{todo.title}\n{todo.description or ''}".lower()
        if needle not in haystack:
            return False
    return True


def filter_todos(todos: Iterable[Todo], criteria: TodoFilter) -> list[Todo]:
    return [todo for todo in todos if todo_matches(todo, criteria)]


def sort_todos(todos: Iterable[Todo], key: TodoSortKey) -> list[Todo]:
    """Sort todos by the selected key.

    - priority: high > medium > low, stable among equal priorities
    - due_date: ascending, todos without a due date last
    - created_at: newest first
    """
    items = list(todos)
    if key == TodoSortKey.PRIORITY:
        # sorted() keeps equal elements in input order even with reverse=True
        return sorted(items, key=lambda t: t.priority.rank, reverse=True)
    if key == TodoSortKey.DUE_DATE:
        return sorted(items, key=lambda t: (t.due_date is None, t.due_date or _NO_DATE))
    return sorted(items, key=lambda t: t.created_at, reverse=True)
