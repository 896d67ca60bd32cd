from __future__ import annotations

from fastapi import APIRouter, Depends

from voicenotes.core.models.note import NoteCategory
from voicenotes.core.models.todo import Priority
from voicenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from voicenotes.core.schemas.taxonomy import NoteTaxonomy
from voicenotes.core.services.taxonomy_service import build_user_note_taxonomy
from voicenotes.dependencies import get_current_user

router = APIRouter()


@router.get("/taxonomy", response_model=NoteTaxonomy)
async def get_user_taxonomy(current_user: AuthUser = Depends(get_current_user)) -> NoteTaxonomy:
    """Return the unique normalized tags across the user's notes."""
    return await build_user_note_taxonomy(user_id=current_user.id)


@router.get("/categories", response_model=list[str])
async def list_note_categories() -> list[str]:
    """Return all note categories for client-side filtering."""
    return [c.value for c in NoteCategory]


@router.get("/priorities", response_model=list[str])
async def list_todo_priorities() -> list[str]:
    """Return todo priorities, lowest first."""
    return [p.value for p in Priority]
