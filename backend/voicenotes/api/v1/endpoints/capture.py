from __future__ import annotations

from fastapi import APIRouter

from voicenotes.core.services.speech_capture import (
    CaptureAvailability,
    ClientEnvironment,
    check_capture_support,
)

router = APIRouter()


@router.post("/support", response_model=CaptureAvailability)
async def get_capture_support(environment: ClientEnvironment) -> CaptureAvailability:
    """Report whether speech capture can start for the described client.

    Each missing prerequisite maps to its own reason code and message so the
    client can show a specific hint.
    """
    return check_capture_support(environment)
