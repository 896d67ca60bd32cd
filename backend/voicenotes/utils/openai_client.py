from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI

from voicenotes.config import settings
from voicenotes.utils.logging import get_logger


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """Return a singleton OpenAI client.

    Only used when `APP_OPENAI_API_KEY` is configured; tag suggestions are
    skipped otherwise.
    """
    if not settings.openai_api_key:
        raise RuntimeError("openai_api_key is required for tag suggestions")
    get_logger(__name__).debug("Initializing OpenAI client")
    return AsyncOpenAI(api_key=settings.openai_api_key)
