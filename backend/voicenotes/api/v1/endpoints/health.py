from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from voicenotes import __version__
from voicenotes.config import settings
from voicenotes.db.base import create_request_supabase_client

router = APIRouter()


@router.get("/")
async def health_check():
    """Liveness check."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "voicenotes-api",
            "version": __version__,
        }
    )


@router.get("/ready")
async def readiness_check():
    """Readiness check; probes the notes table."""
    db_status = "connected"
    try:
        client = create_request_supabase_client()
        await asyncio.to_thread(lambda: client.table("notes").select("id").limit(1).execute())
    except Exception as e:
        db_status = f"error: {str(e)}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "tag_suggestions": "enabled" if settings.enrichment_enabled else "disabled",
            "api_prefix": settings.api_prefix,
        }
    )
