from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx
from postgrest.exceptions import APIError

from voicenotes.core.exceptions import BackendError
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel
    from supabase import Client

logger = get_logger(__name__)


async def run_query(operation: str, table: str, func: Callable[[], Any]) -> Any:
    """Run a blocking PostgREST call in a worker thread, wrapping failures in `BackendError`."""
    try:
        return await asyncio.to_thread(func)
    except APIError as err:
        message = getattr(err, "message", None) or str(err)
        logger.error("Supabase %s on %s failed: %s", operation, table, message)
        raise BackendError(operation, message) from err
    except httpx.HTTPError as err:
        logger.error("Supabase %s on %s unreachable: %s", operation, table, err)
        raise BackendError(operation, str(err)) from err


class SupabaseRepository:
    """Shared plumbing for PostgREST-backed repositories.

    supabase-py is synchronous, so every query runs in a worker thread.
    PostgREST and transport errors are re-raised as `BackendError`.
    """

    TABLE_NAME: str = ""

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    def _table(self, name: str | None = None):
        return self._client.table(name or self.TABLE_NAME)

    async def _run(self, operation: str, func: Callable[[], Any]) -> Any:
        return await run_query(operation, self.TABLE_NAME, func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _model_fields(model: type[BaseModel], row: dict[str, Any]) -> dict[str, Any]:
        """Drop columns the domain model does not know about (joins, audit columns)."""
        return {k: v for k, v in row.items() if k in model.model_fields}

    @staticmethod
    def _to_row(model: BaseModel) -> dict[str, Any]:
        # PostgREST expects JSON-serializable payloads (UUID/datetime as strings)
        return model.model_dump(mode="json")

    @staticmethod
    def _serialize_changes(changes: dict[str, Any]) -> dict[str, Any]:
        sanitized: dict[str, Any] = {}
        for key, value in changes.items():
            if key in {"id", "user_id", "created_at"}:
                continue
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            elif hasattr(value, "value"):
                value = value.value
            sanitized[key] = value
        return sanitized
