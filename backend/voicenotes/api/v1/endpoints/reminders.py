from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from voicenotes.api.v1.schemas.reminder import (
    DispatchErrorResponse,
    DispatchRequest,
    DispatchResponse,
)
from voicenotes.core.services.reminder_service import ReminderDispatcher  # noqa: TCH001
from voicenotes.dependencies import get_reminder_dispatcher, verify_dispatch_secret
from voicenotes.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    dependencies=[Depends(verify_dispatch_secret)],
    responses={
        400: {"model": DispatchErrorResponse, "description": "Batch aborted"},
        401: {"description": "Invalid dispatch secret"},
    },
)


@router.post("/dispatch", response_model=DispatchResponse)
async def dispatch_reminders(
    payload: DispatchRequest | None = None,
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
):
    """Queue reminder emails for todos due within the reminder window.

    Meant to be called by a scheduler. The whole batch fails on the first
    error; reminders already claimed stay marked as sent.
    """
    now = payload.now if payload else None
    try:
        processed = await dispatcher.dispatch(now)
    except Exception as err:
        logger.error("Reminder dispatch failed", extra={"error": str(err)})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(err) or type(err).__name__},
        )
    return DispatchResponse(message=f"Successfully processed {processed} reminders")
