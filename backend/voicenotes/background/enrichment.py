from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from voicenotes.core.models.base import normalize_tags
from voicenotes.core.models.note import NoteCategory
from voicenotes.core.services.enrichment_service import suggest_note_metadata
from voicenotes.core.services.taxonomy_service import build_user_note_taxonomy
from voicenotes.db.base import get_supabase_admin_client
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

logger = get_logger(__name__)


def merge_suggestions(
    *,
    current_tags: list[str],
    current_category: str | None,
    suggestion: dict[str, Any],
) -> dict[str, Any]:
    """Return the column changes implied by a suggestion, or {} when nothing changes.

    The note's existing tags are kept; suggestions only fill the remaining
    tag slots. The category is only filled in when the note has none.
    """
    suggested = [t for t in (suggestion.get("tags") or []) if isinstance(t, str)]
    merged_tags = normalize_tags(list(current_tags) + suggested)

    changes: dict[str, Any] = {}
    if merged_tags != list(current_tags):
        changes["tags"] = merged_tags

    category = suggestion.get("category")
    if not current_category and category in {c.value for c in NoteCategory}:
        changes["category"] = category
    return changes


async def enrich_and_store_note_metadata(
    *,
    note_id: UUID,
    user_id: UUID,
    content: str,
) -> None:
    """Background job to suggest tags/category for a new note and persist them.

    Uses the Supabase admin client since it runs outside the request. Errors
    are logged and swallowed.
    """
    logger.info("Starting enrichment job for note %s (user: %s)", note_id, user_id)

    try:
        client = get_supabase_admin_client()

        def _get_current_note() -> Any:
            return (
                client
                .table("notes")
                .select("tags, category")
                .eq("id", str(note_id))
                .limit(1)
                .execute()
            )

        note_resp = await asyncio.to_thread(_get_current_note)
        current_row: dict[str, Any] = (note_resp.data or [{}])[0] or {}
        current_tags = current_row.get("tags") or []
        if not isinstance(current_tags, list):
            current_tags = []

        taxonomy = await build_user_note_taxonomy(user_id=user_id, client=client)
        suggestion = await suggest_note_metadata(
            content=content,
            taxonomy=taxonomy,
            existing_tags=current_tags,
        )

        changes = merge_suggestions(
            current_tags=current_tags,
            current_category=current_row.get("category"),
            suggestion=suggestion,
        )
        if not changes:
            logger.info("No changes suggested for note %s", note_id)
            return

        await asyncio.to_thread(
            lambda: client
            .table("notes")
            .update(changes)
            .eq("id", str(note_id))
            .execute()
        )
        logger.info("Updated note %s with suggested metadata", note_id, extra={"fields": sorted(changes)})

    except Exception as err:  # pragma: no cover - external failures
        logger.error("Enrichment job failed for note %s: %s", note_id, err)
