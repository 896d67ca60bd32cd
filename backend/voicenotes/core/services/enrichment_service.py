from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voicenotes.config import settings
from voicenotes.core.models.note import NoteCategory
from voicenotes.core.schemas.enrichment import NoteEnrichmentResult
from voicenotes.utils.logging import get_logger
from voicenotes.utils.openai_client import get_openai_client

if TYPE_CHECKING:
    from voicenotes.core.schemas.taxonomy import NoteTaxonomy

logger = get_logger(__name__)

_EMPTY_RESULT: dict[str, Any] = {"tags": [], "category": None}


async def suggest_note_metadata(
    *,
    content: str,
    taxonomy: NoteTaxonomy | None = None,
    existing_tags: list[str] | None = None,
) -> dict[str, Any]:
    """Use the OpenAI Responses API to suggest tags and a category for a note.

    The user's existing tag vocabulary and the note's current tags are sent
    as context to encourage reuse. Returns a dict with keys:
      - tags: list[str]
      - category: str | None
    """
    text = (content or "").strip()
    if not text:
        logger.warning("No text content available for enrichment")
        return dict(_EMPTY_RESULT)

    client = get_openai_client()

    tag_vocab = taxonomy.tag_vocab if taxonomy else []
    existing_tags = [t for t in (existing_tags or []) if isinstance(t, str)]

    instructions = (
        "You are organizing a personal voice note transcript. "
        "Return JSON only, matching the provided schema.\n"
        "- Prefer reusing existing tags from tag_vocab; only propose a new tag if no suitable existing tag fits.\n"
        "- Keep tags lowercase, max 5.\n"
        f"- Pick a category from {[c.value for c in NoteCategory]} or null if none fits."
    )
    context = {
        "tag_vocab": tag_vocab,
        "existing_tags": existing_tags,
    }
    composed_input = "NOTE:\n" + text + "\n\nCONTEXT:\n" + str(context)

    try:
        logger.info("Requesting tag suggestions")
        response = await client.responses.parse(
            model=settings.enrichment_model,
            input=[
                {"role": "system", "content": instructions},
                {"role": "user", "content": composed_input},
            ],
            reasoning={"effort": settings.enrichment_model_reasoning},
            text={"verbosity": "low"},
            text_format=NoteEnrichmentResult,
        )

        if getattr(response, "refusal", None):
            logger.warning("OpenAI refused to process the note: %s", response.refusal)
            return dict(_EMPTY_RESULT)

        result = response.output_parsed
        if result is None:
            return dict(_EMPTY_RESULT)
        return result.model_dump(mode="json")

    except Exception as err:  # pragma: no cover - network/parse errors
        logger.error("Failed to enrich note: %s", err)
        return dict(_EMPTY_RESULT)
