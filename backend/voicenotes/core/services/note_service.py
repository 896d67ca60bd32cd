from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from voicenotes.core.models.base import normalize_tags
from voicenotes.core.models.note import Note
from voicenotes.core.services.filtering import NoteFilter, filter_notes
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from voicenotes.api.v1.schemas.note import NoteCreate, NoteUpdate
    from voicenotes.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)


class NoteService:
    """Service for managing notes with user-scoped access (RLS friendly)."""

    _UPDATABLE_FIELDS = {"content", "category", "tags", "is_archived", "audio_url", "formatted_content"}

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def create_note(self, create_dto: NoteCreate, user_id: UUID) -> Note:
        """Create a note for a user; empty content is rejected before any write."""
        content = (create_dto.content or "").strip()
        if not content:
            raise ValueError("Note content must not be empty")

        note = Note(
            id=uuid4(),
            content=content,
            category=create_dto.category,
            tags=normalize_tags(create_dto.tags or []),
            is_archived=create_dto.is_archived,
            audio_url=create_dto.audio_url,
            formatted_content=create_dto.formatted_content,
            user_id=user_id,
        )
        created = await self._repo.create(note)
        logger.info("Created note %s", created.id, extra={"user_id": str(user_id)})
        return created

    async def get_note(self, note_id: str | UUID, user_id: UUID) -> Note | None:
        """Return note if it exists and belongs to the user; otherwise None."""
        try:
            note_uuid = UUID(str(note_id))
        except ValueError:
            return None
        note = await self._repo.get(note_uuid)
        if note and note.user_id == user_id:
            return note
        return None

    async def list_notes(self, user_id: UUID, criteria: NoteFilter | None = None) -> list[Note]:
        """List a user's notes, newest first, narrowed by the given predicates."""
        notes = await self._repo.list(user_id=user_id)
        return filter_notes(notes, criteria or NoteFilter())

    async def update_note(self, note_id: str | UUID, update_dto: NoteUpdate, user_id: UUID) -> Note | None:
        """Apply a partial update to a user's note.

        Only fields explicitly sent by the client are changed. Content may be
        replaced but never cleared.
        """
        existing = await self.get_note(note_id, user_id)
        if not existing:
            return None

        changes = {
            key: value
            for key, value in update_dto.model_dump(exclude_unset=True).items()
            if key in self._UPDATABLE_FIELDS
        }
        if "content" in changes:
            content = (changes["content"] or "").strip()
            if not content:
                raise ValueError("Note content must not be empty")
            changes["content"] = content
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"] or [])
        if "is_archived" in changes and changes["is_archived"] is None:
            del changes["is_archived"]

        return await self._repo.update_fields(existing.id, changes)

    async def toggle_archived(self, note_id: str | UUID, user_id: UUID) -> Note | None:
        """Flip the archived flag from its stored value."""
        existing = await self.get_note(note_id, user_id)
        if not existing:
            return None
        return await self._repo.update_fields(existing.id, {"is_archived": not existing.is_archived})

    async def delete_note(self, note_id: str | UUID, user_id: UUID) -> bool:
        """Delete a user's note if it exists and belongs to them."""
        note = await self.get_note(note_id, user_id)
        if not note:
            return False
        deleted = await self._repo.delete(note.id)
        if deleted:
            logger.info("Deleted note %s", note.id, extra={"user_id": str(user_id)})
        return deleted
