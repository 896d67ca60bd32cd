from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from voicenotes.api.v1.schemas.note import NoteCreate, NoteRead, NoteUpdate
from voicenotes.background import enrich_and_store_note_metadata
from voicenotes.config import settings
from voicenotes.core.models.note import NoteCategory  # noqa: TCH001
from voicenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from voicenotes.core.services.filtering import NoteFilter
from voicenotes.core.services.note_service import NoteService  # noqa: TCH001
from voicenotes.dependencies import get_current_user, get_note_service

router = APIRouter()


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    try:
        note = await service.create_note(payload, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if settings.enrichment_enabled:
        background_tasks.add_task(
            enrich_and_store_note_metadata,
            note_id=note.id,
            user_id=current_user.id,
            content=note.content,
        )
    return NoteRead.model_validate(note)


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    category: NoteCategory | None = None,
    search: str | None = None,
    archived: bool = False,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """List the user's notes matching every given filter, newest first.

    `search` matches note content or any tag (case-insensitive). Archived
    notes are only returned with `archived=true`.
    """
    criteria = NoteFilter(category=category, search=search, is_archived=archived)
    notes = await service.list_notes(user_id=current_user.id, criteria=criteria)
    return [NoteRead.model_validate(n) for n in notes]


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    try:
        note = await service.update_note(note_id, payload, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.post("/{note_id}/archive", response_model=NoteRead)
async def toggle_note_archived(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """Archive an active note or restore an archived one."""
    note = await service.toggle_archived(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    deleted = await service.delete_note(note_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")
    return None
