"""
Unit tests for NoteService.

Uses the in-memory repository from conftest, so every backend call is
observable through `note_repo.calls`.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from voicenotes.api.v1.schemas.note import NoteCreate, NoteUpdate
from voicenotes.core.models.note import NoteCategory
from voicenotes.core.services.filtering import NoteFilter
from voicenotes.core.services.note_service import NoteService


@pytest.fixture
def service(note_repo):
    return NoteService(note_repo)


class TestCreateNote:
    @pytest.mark.asyncio
    async def test_create_note_success(self, service, note_repo, user):
        note = await service.create_note(
            NoteCreate(content="  Pick up dry cleaning  ", category=NoteCategory.PERSONAL, tags=["Errands", "errands"]),
            user_id=user.id,
        )

        assert note.content == "Pick up dry cleaning"
        assert note.category == NoteCategory.PERSONAL
        assert note.tags == ["errands"]
        assert note.user_id == user.id
        assert note.is_archived is False
        assert note_repo.rows[note.id] == note

    def test_empty_content_rejected_by_schema(self):
        with pytest.raises(ValidationError):
            NoteCreate(content="   ")

    @pytest.mark.asyncio
    async def test_empty_content_never_reaches_backend(self, service, note_repo, user):
        dto = NoteCreate.model_construct(content="  ", tags=[], category=None, is_archived=False,
                                         audio_url=None, formatted_content=None)

        with pytest.raises(ValueError, match="must not be empty"):
            await service.create_note(dto, user_id=user.id)

        assert note_repo.calls == []


class TestReadNotes:
    @pytest.mark.asyncio
    async def test_get_note_of_other_user_is_hidden(self, service, user, other_user):
        note = await service.create_note(NoteCreate(content="private"), user_id=user.id)

        assert await service.get_note(note.id, user_id=other_user.id) is None
        assert (await service.get_note(note.id, user_id=user.id)).id == note.id

    @pytest.mark.asyncio
    async def test_get_note_with_malformed_id(self, service, user):
        assert await service.get_note("not-a-uuid", user_id=user.id) is None

    @pytest.mark.asyncio
    async def test_list_notes_applies_filter_to_own_notes(self, service, user, other_user):
        await service.create_note(NoteCreate(content="work item", category=NoteCategory.WORK), user_id=user.id)
        await service.create_note(NoteCreate(content="idea", category=NoteCategory.IDEAS), user_id=user.id)
        await service.create_note(NoteCreate(content="their work", category=NoteCategory.WORK), user_id=other_user.id)

        result = await service.list_notes(user.id, NoteFilter(category=NoteCategory.WORK))

        assert [n.content for n in result] == ["work item"]


class TestMutateNotes:
    @pytest.mark.asyncio
    async def test_toggle_archived_twice_restores_state(self, service, user):
        note = await service.create_note(NoteCreate(content="toggle me"), user_id=user.id)

        archived = await service.toggle_archived(note.id, user_id=user.id)
        restored = await service.toggle_archived(note.id, user_id=user.id)

        assert archived.is_archived is True
        assert restored.is_archived is False
        assert restored.model_dump() == note.model_dump()

    @pytest.mark.asyncio
    async def test_update_only_sent_fields(self, service, user):
        note = await service.create_note(
            NoteCreate(content="original", category=NoteCategory.IDEAS, tags=["a"]), user_id=user.id
        )

        updated = await service.update_note(note.id, NoteUpdate(tags=["B", "c"]), user_id=user.id)

        assert updated.tags == ["b", "c"]
        assert updated.content == "original"
        assert updated.category == NoteCategory.IDEAS

    @pytest.mark.asyncio
    async def test_update_can_clear_category(self, service, user):
        note = await service.create_note(NoteCreate(content="x", category=NoteCategory.WORK), user_id=user.id)

        updated = await service.update_note(note.id, NoteUpdate(category=None), user_id=user.id)

        assert updated.category is None

    @pytest.mark.asyncio
    async def test_update_missing_note_returns_none(self, service, user):
        assert await service.update_note(uuid4(), NoteUpdate(content="x"), user_id=user.id) is None

    @pytest.mark.asyncio
    async def test_delete_removes_exactly_one_note(self, service, note_repo, user):
        keep = await service.create_note(NoteCreate(content="keep"), user_id=user.id)
        drop = await service.create_note(NoteCreate(content="drop"), user_id=user.id)

        assert await service.delete_note(drop.id, user_id=user.id) is True

        assert set(note_repo.rows) == {keep.id}
        assert await service.delete_note(drop.id, user_id=user.id) is False

    @pytest.mark.asyncio
    async def test_delete_other_users_note_is_refused(self, service, note_repo, user, other_user):
        note = await service.create_note(NoteCreate(content="mine"), user_id=user.id)

        assert await service.delete_note(note.id, user_id=other_user.id) is False
        assert note.id in note_repo.rows
