"""
Shared pytest fixtures.

Tests never talk to Supabase: repositories are replaced by in-memory
implementations of the same abstract interfaces, and the FastAPI app gets
them through `dependency_overrides`.
"""

import asyncio
import os
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

# Settings are read at import time; provide dummy backend credentials first.
os.environ.setdefault("APP_SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("APP_SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("APP_SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.pop("APP_OPENAI_API_KEY", None)
os.environ.pop("APP_DISPATCH_SECRET", None)

from fastapi.testclient import TestClient  # noqa: E402

from voicenotes.core.exceptions import BackendError  # noqa: E402
from voicenotes.core.models.reminder import DueReminder, OutboundEmail  # noqa: E402
from voicenotes.core.models.todo import Todo  # noqa: E402
from voicenotes.core.repositories.note_repository import NoteRepository  # noqa: E402
from voicenotes.core.repositories.reminder_repository import ReminderRepository  # noqa: E402
from voicenotes.core.repositories.todo_repository import TodoRepository  # noqa: E402
from voicenotes.core.schemas.auth import AuthUser  # noqa: E402


# =============================================================================
# In-memory repositories
# =============================================================================


class _InMemoryRepository:
    def __init__(self):
        self.rows = {}
        self.calls = []
        self.fail_with = None

    def _record(self, op):
        self.calls.append(op)
        if self.fail_with is not None:
            raise self.fail_with

    async def create(self, entity):
        self._record("create")
        self.rows[entity.id] = entity
        return entity

    async def get(self, entity_id):
        self._record("get")
        return self.rows.get(entity_id)

    async def list(self, *, user_id):
        self._record("list")
        owned = [e for e in self.rows.values() if e.user_id == user_id]
        return sorted(owned, key=lambda e: e.created_at, reverse=True)

    async def update_fields(self, entity_id, changes):
        self._record("update")
        existing = self.rows.get(entity_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=changes)
        self.rows[entity_id] = updated
        return updated

    async def delete(self, entity_id):
        self._record("delete")
        return self.rows.pop(entity_id, None) is not None


class InMemoryNoteRepository(_InMemoryRepository, NoteRepository):
    pass


class InMemoryTodoRepository(_InMemoryRepository, TodoRepository):
    pass


class InMemoryReminderRepository(ReminderRepository):
    """Reminder storage sharing the todo rows of an InMemoryTodoRepository."""

    def __init__(self, todos: InMemoryTodoRepository):
        self.todos = todos
        self.profiles: dict[UUID, str] = {}
        self.emails: list[OutboundEmail] = []
        self.fail_on_enqueue: Exception | None = None
        self.fail_on_list: Exception | None = None

    async def list_due(self, *, window_start, window_end):
        if self.fail_on_list is not None:
            raise self.fail_on_list
        due = [
            DueReminder(todo=t, email=self.profiles.get(t.user_id))
            for t in self.todos.rows.values()
            if not t.reminder_sent
            and t.reminder_date is not None
            and window_start <= t.reminder_date <= window_end
        ]
        # Yield so concurrent dispatches interleave between read and claim
        await asyncio.sleep(0)
        return sorted(due, key=lambda r: r.todo.reminder_date)

    async def claim(self, todo_id):
        todo = self.todos.rows.get(todo_id)
        if todo is None or todo.reminder_sent:
            return False
        self.todos.rows[todo_id] = todo.model_copy(update={"reminder_sent": True})
        return True

    async def release(self, todo_id):
        todo = self.todos.rows[todo_id]
        self.todos.rows[todo_id] = todo.model_copy(update={"reminder_sent": False})

    async def enqueue_email(self, email):
        await asyncio.sleep(0)
        if self.fail_on_enqueue is not None:
            raise self.fail_on_enqueue
        self.emails.append(email)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def user() -> AuthUser:
    return AuthUser(id=uuid4(), email="owner@example.com")


@pytest.fixture
def other_user() -> AuthUser:
    return AuthUser(id=uuid4(), email="someone-else@example.com")


@pytest.fixture
def note_repo() -> InMemoryNoteRepository:
    return InMemoryNoteRepository()


@pytest.fixture
def todo_repo() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()


@pytest.fixture
def reminder_repo(todo_repo) -> InMemoryReminderRepository:
    return InMemoryReminderRepository(todo_repo)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


@pytest.fixture
def make_todo(todo_repo, user):
    """Insert a todo row directly into the in-memory store."""

    def _make(**fields) -> Todo:
        fields.setdefault("title", "Water the plants")
        fields.setdefault("user_id", user.id)
        todo = Todo(**fields)
        todo_repo.rows[todo.id] = todo
        return todo

    return _make


@pytest.fixture
def backend_error() -> BackendError:
    return BackendError("insert", "connection reset")


@pytest.fixture
def client(user, note_repo, todo_repo, reminder_repo):
    """TestClient with auth and storage replaced by in-memory fakes."""
    from voicenotes.dependencies import (
        get_current_user,
        get_note_repository,
        get_reminder_repository,
        get_todo_repository,
    )
    from voicenotes.main import app

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_note_repository] = lambda: note_repo
    app.dependency_overrides[get_todo_repository] = lambda: todo_repo
    app.dependency_overrides[get_reminder_repository] = lambda: reminder_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def in_five_minutes(now) -> datetime:
    return now + timedelta(minutes=5)
