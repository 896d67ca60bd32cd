from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voicenotes.core.repositories.implementations.supabase.base import run_query
from voicenotes.core.schemas.taxonomy import NoteTaxonomy
from voicenotes.db.base import get_supabase_admin_client

if TYPE_CHECKING:
    from uuid import UUID

    from supabase import Client


def collect_tag_vocab(rows: list[dict[str, Any]], into: set[str]) -> None:
    for row in rows:
        tags = row.get("tags") or []
        if isinstance(tags, list):
            for t in tags:
                if isinstance(t, str) and t.strip():
                    into.add(t.strip().lower())


async def build_user_note_taxonomy(
    *,
    user_id: UUID,
    client: Client | None = None,
    page_size: int = 1000,
) -> NoteTaxonomy:
    """Aggregate unique tags for a user's notes.

    Pages through the `notes` table with the admin client, still scoped to
    `user_id`. Tags are normalized to lowercase. Query failures raise
    `BackendError`.
    """
    supabase: Client = client or get_supabase_admin_client()

    offset = 0
    tag_set: set[str] = set()

    while True:
        def _fetch_page() -> Any:
            return (
                supabase
                .table("notes")
                .select("tags")
                .eq("user_id", str(user_id))
                .range(offset, offset + page_size - 1)
                .execute()
            )

        resp = await run_query("select", "notes", _fetch_page)

        rows: list[dict[str, Any]] = resp.data or []
        if not rows:
            break

        collect_tag_vocab(rows, tag_set)

        if len(rows) < page_size:
            break
        offset += page_size

    return NoteTaxonomy(tag_vocab=sorted(tag_set))
