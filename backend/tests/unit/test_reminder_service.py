"""
Unit tests for the reminder dispatcher.
"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from voicenotes.core.exceptions import BackendError, ReminderDispatchError
from voicenotes.core.models.todo import Priority
from voicenotes.core.services.reminder_service import (
    ReminderDispatcher,
    format_due_date,
    render_reminder_email,
)


@pytest.fixture
def dispatcher(reminder_repo):
    return ReminderDispatcher(reminder_repo)


@pytest.fixture
def registered(reminder_repo, user):
    reminder_repo.profiles[user.id] = user.email
    return user


class TestDispatch:
    @pytest.mark.asyncio
    async def test_due_reminder_is_sent_once(self, dispatcher, reminder_repo, todo_repo, make_todo, registered, now):
        todo = make_todo(title="Stretch", reminder_date=now + timedelta(minutes=2))

        first = await dispatcher.dispatch(now)
        second = await dispatcher.dispatch(now)

        assert first == 1
        assert second == 0
        assert len(reminder_repo.emails) == 1
        assert reminder_repo.emails[0].to == registered.email
        assert reminder_repo.emails[0].subject == "Reminder: Stretch"
        assert todo_repo.rows[todo.id].reminder_sent is True

    @pytest.mark.asyncio
    async def test_window_bounds_are_inclusive(self, dispatcher, reminder_repo, make_todo, registered, now):
        make_todo(title="at start", reminder_date=now)
        make_todo(title="at end", reminder_date=now + timedelta(minutes=5))
        make_todo(title="too late", reminder_date=now + timedelta(minutes=5, seconds=1))
        make_todo(title="past", reminder_date=now - timedelta(seconds=1))
        make_todo(title="no reminder")

        processed = await dispatcher.dispatch(now)

        assert processed == 2
        assert sorted(e.subject for e in reminder_repo.emails) == ["Reminder: at end", "Reminder: at start"]

    @pytest.mark.asyncio
    async def test_already_sent_reminders_are_skipped(self, dispatcher, reminder_repo, make_todo, registered, now):
        make_todo(reminder_date=now + timedelta(minutes=1), reminder_sent=True)

        assert await dispatcher.dispatch(now) == 0
        assert reminder_repo.emails == []

    @pytest.mark.asyncio
    async def test_custom_window(self, reminder_repo, make_todo, registered, now):
        make_todo(reminder_date=now + timedelta(minutes=9))
        dispatcher = ReminderDispatcher(reminder_repo, window=timedelta(minutes=10))

        assert await dispatcher.dispatch(now) == 1

    @pytest.mark.asyncio
    async def test_naive_now_is_treated_as_utc(self, dispatcher, make_todo, registered, now):
        make_todo(reminder_date=now + timedelta(minutes=1))

        assert await dispatcher.dispatch(now.replace(tzinfo=None)) == 1

    @pytest.mark.asyncio
    async def test_overlapping_runs_send_one_email(self, reminder_repo, make_todo, registered, now):
        todo = make_todo(reminder_date=now + timedelta(minutes=2))
        first = ReminderDispatcher(reminder_repo)
        second = ReminderDispatcher(reminder_repo)

        results = await asyncio.gather(first.dispatch(now), second.dispatch(now))

        assert sorted(results) == [0, 1]
        assert len(reminder_repo.emails) == 1
        assert reminder_repo.todos.rows[todo.id].reminder_sent is True


class TestDispatchFailures:
    @pytest.mark.asyncio
    async def test_query_failure_aborts(self, dispatcher, reminder_repo, backend_error, now):
        reminder_repo.fail_on_list = backend_error

        with pytest.raises(BackendError):
            await dispatcher.dispatch(now)

    @pytest.mark.asyncio
    async def test_email_failure_aborts_and_releases_claim(
        self, dispatcher, reminder_repo, todo_repo, make_todo, registered, backend_error, now
    ):
        todo = make_todo(reminder_date=now + timedelta(minutes=1))
        make_todo(title="second", reminder_date=now + timedelta(minutes=2))
        reminder_repo.fail_on_enqueue = backend_error

        with pytest.raises(BackendError):
            await dispatcher.dispatch(now)

        assert todo_repo.rows[todo.id].reminder_sent is False
        assert all(not t.reminder_sent for t in todo_repo.rows.values())

    @pytest.mark.asyncio
    async def test_missing_owner_email_aborts(self, dispatcher, reminder_repo, make_todo, now):
        make_todo(reminder_date=now + timedelta(minutes=1))

        with pytest.raises(ReminderDispatchError, match="No registered email"):
            await dispatcher.dispatch(now)
        assert reminder_repo.emails == []


class TestReminderEmail:
    def test_email_embeds_todo_details(self, make_todo):
        todo = make_todo(
            title="Submit report",
            description="Quarterly numbers",
            priority=Priority.HIGH,
            due_date=datetime(2026, 10, 20, 17, 30, tzinfo=UTC),
        )

        email = render_reminder_email(todo, "owner@example.com")

        assert email.to == "owner@example.com"
        assert email.subject == "Reminder: Submit report"
        assert "<h1>Reminder for your todo: Submit report</h1>" in email.html
        assert "<p>Quarterly numbers</p>" in email.html
        assert "Due date: 2026-10-20 17:30 UTC" in email.html
        assert "Priority: High" in email.html

    def test_email_without_description_or_due_date(self, make_todo):
        email = render_reminder_email(make_todo(title="Ping"), "a@b.c")

        assert "<p></p>" in email.html
        assert "Due date: No due date" in email.html
        assert "Priority: Medium" in email.html

    def test_user_text_is_escaped(self, make_todo):
        email = render_reminder_email(make_todo(title="<b>bold</b>", description="a & b"), "a@b.c")

        assert "&lt;b&gt;bold&lt;/b&gt;" in email.html
        assert "a &amp; b" in email.html

    def test_format_due_date_converts_to_utc(self):
        from datetime import timezone

        plus_two = timezone(timedelta(hours=2))
        assert format_due_date(datetime(2026, 1, 1, 12, 0, tzinfo=plus_two)) == "2026-01-01 10:00 UTC"
