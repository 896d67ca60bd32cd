from __future__ import annotations

from datetime import UTC, datetime, timedelta
from html import escape
from typing import TYPE_CHECKING

from voicenotes.core.exceptions import ReminderDispatchError
from voicenotes.core.models.base import ensure_utc
from voicenotes.core.models.reminder import OutboundEmail
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from voicenotes.core.models.todo import Todo
    from voicenotes.core.repositories.reminder_repository import ReminderRepository

logger = get_logger(__name__)

DEFAULT_REMINDER_WINDOW = timedelta(minutes=5)


def format_due_date(due_date: datetime | None) -> str:
    if due_date is None:
        return "No due date"
    return ensure_utc(due_date).strftime("%Y-%m-%d %H:%M UTC")


def render_reminder_email(todo: Todo, to: str) -> OutboundEmail:
    """Build the reminder email for a todo."""
    title = escape(todo.title)
    body = (
        f"<h1>Reminder for your todo: {title}</h1>\n"
        f"<p>{escape(todo.description or '')}</p>\n"
        f"<p>Due date: {format_due_date(todo.due_date)}</p>\n"
        f"<p>Priority: {todo.priority.value.capitalize()}</p>\n"
    )
    return OutboundEmail(to=to, subject=f"Reminder: {todo.title}", html=body)


class ReminderDispatcher:
    """Queues reminder emails for todos whose reminder falls in the window.

    Each todo is claimed with a conditional update before its email is queued,
    so overlapping runs queue at most one email per reminder. Any failure
    aborts the batch; nothing is retried.
    """

    def __init__(self, repo: ReminderRepository, window: timedelta = DEFAULT_REMINDER_WINDOW) -> None:
        self._repo = repo
        self._window = window

    async def dispatch(self, now: datetime | None = None) -> int:
        """Process due reminders and return how many emails were queued."""
        window_start = ensure_utc(now) if now is not None else datetime.now(UTC)
        window_end = window_start + self._window

        due = await self._repo.list_due(window_start=window_start, window_end=window_end)
        logger.info(
            "Found %d due reminders",
            len(due),
            extra={"window_start": window_start.isoformat(), "window_end": window_end.isoformat()},
        )

        processed = 0
        for reminder in due:
            todo = reminder.todo
            if not reminder.email:
                raise ReminderDispatchError(f"No registered email for owner of todo {todo.id}")

            if not await self._repo.claim(todo.id):
                logger.info("Reminder for todo %s already claimed, skipping", todo.id)
                continue

            try:
                await self._repo.enqueue_email(render_reminder_email(todo, reminder.email))
            except Exception:
                await self._release_quietly(todo)
                raise

            processed += 1

        logger.info("Processed %d reminders", processed)
        return processed

    async def _release_quietly(self, todo: Todo) -> None:
        try:
            await self._repo.release(todo.id)
        except Exception as err:
            logger.error("Failed to release reminder claim for todo %s: %s", todo.id, err)
