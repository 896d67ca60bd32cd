from .enrichment import enrich_and_store_note_metadata

__all__ = [
    "enrich_and_store_note_metadata",
]
