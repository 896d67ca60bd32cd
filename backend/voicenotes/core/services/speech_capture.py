"""Speech capture capability checks and transcript session state.

The microphone and the recognition engine live in the client; they are
modelled as small protocols so the session logic (permission handling,
transcript accumulation, idempotent stop) can be driven and tested
independently of any particular engine.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

from voicenotes.core.models.base import AppBaseModel
from voicenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = get_logger(__name__)


class CaptureUnavailableReason(str, Enum):
    NOT_A_BROWSER = "not_a_browser"
    INSECURE_CONTEXT = "insecure_context"
    NO_MEDIA_DEVICES = "no_media_devices"
    NO_AUDIO_CAPTURE = "no_audio_capture"
    NO_SPEECH_RECOGNITION = "no_speech_recognition"
    PERMISSION_DENIED = "permission_denied"
    MICROPHONE_ERROR = "microphone_error"
    RECOGNITION_UNAVAILABLE = "recognition_unavailable"


UNAVAILABLE_MESSAGES: dict[CaptureUnavailableReason, str] = {
    CaptureUnavailableReason.NOT_A_BROWSER: "This feature is only available in the browser.",
    CaptureUnavailableReason.INSECURE_CONTEXT: "Media recording requires a secure context (HTTPS or localhost).",
    CaptureUnavailableReason.NO_MEDIA_DEVICES: "Media devices API is not available in your browser.",
    CaptureUnavailableReason.NO_AUDIO_CAPTURE: "Audio recording is not supported in your browser.",
    CaptureUnavailableReason.NO_SPEECH_RECOGNITION: (
        "Speech recognition is not supported in your browser. Try Chrome, Edge or Safari."
    ),
    CaptureUnavailableReason.PERMISSION_DENIED: "Microphone access was denied. Allow access and try again.",
    CaptureUnavailableReason.MICROPHONE_ERROR: "Error accessing microphone.",
    CaptureUnavailableReason.RECOGNITION_UNAVAILABLE: "Speech recognition could not be initialized.",
}


class ClientEnvironment(AppBaseModel):
    """Capabilities reported by the client runtime."""

    is_browser: bool = True
    is_secure_context: bool
    has_media_devices: bool
    has_get_user_media: bool
    has_speech_recognition: bool


class CaptureAvailability(AppBaseModel):
    available: bool
    reason: CaptureUnavailableReason | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> CaptureAvailability:
        return cls(available=True)

    @classmethod
    def unavailable(cls, reason: CaptureUnavailableReason, message: str | None = None) -> CaptureAvailability:
        return cls(available=False, reason=reason, message=message or UNAVAILABLE_MESSAGES[reason])


def check_capture_support(env: ClientEnvironment) -> CaptureAvailability:
    """Return whether speech capture can start, checking prerequisites in order."""
    if not env.is_browser:
        return CaptureAvailability.unavailable(CaptureUnavailableReason.NOT_A_BROWSER)
    if not env.is_secure_context:
        return CaptureAvailability.unavailable(CaptureUnavailableReason.INSECURE_CONTEXT)
    if not env.has_media_devices:
        return CaptureAvailability.unavailable(CaptureUnavailableReason.NO_MEDIA_DEVICES)
    if not env.has_get_user_media:
        return CaptureAvailability.unavailable(CaptureUnavailableReason.NO_AUDIO_CAPTURE)
    if not env.has_speech_recognition:
        return CaptureAvailability.unavailable(CaptureUnavailableReason.NO_SPEECH_RECOGNITION)
    return CaptureAvailability.ok()


class Microphone(Protocol):
    async def request_access(self) -> None:
        """Prompt for microphone access; raise PermissionError when denied."""

    def release(self) -> None:
        """Stop all capture tracks."""


class SpeechRecognizer(Protocol):
    def start(
        self,
        *,
        on_results: Callable[[Sequence[Sequence[str]]], None],
        on_error: Callable[[str], None],
        language: str,
    ) -> None:
        """Begin continuous recognition with interim results."""

    def stop(self) -> None: ...


class SessionState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    RECORDING = "recording"
    DISABLED = "disabled"


class TranscriptionSession:
    """Tracks one recording session and its live transcript.

    Every partial result overwrites the transcript and is forwarded to
    `on_transcript`. A failed start disables the session until `retry()`.
    `stop()` during the permission prompt cancels the pending start.
    """

    def __init__(
        self,
        environment: ClientEnvironment,
        microphone: Microphone,
        recognizer: SpeechRecognizer,
        on_transcript: Callable[[str], None],
        language: str = "en-US",
    ) -> None:
        self._environment = environment
        self._microphone = microphone
        self._recognizer = recognizer
        self._on_transcript = on_transcript
        self._language = language
        self._mic_open = False
        self._access_pending = False
        self.state = SessionState.IDLE
        self.transcript = ""
        self.error: str | None = None

    @property
    def is_recording(self) -> bool:
        return self.state == SessionState.RECORDING

    async def start(self) -> bool:
        if self.state == SessionState.RECORDING:
            return True
        if self._access_pending or self.state == SessionState.DISABLED:
            return False

        self.error = None
        availability = check_capture_support(self._environment)
        if not availability.available:
            self._disable(availability.message)
            return False

        self.state = SessionState.STARTING
        self._access_pending = True
        try:
            await self._microphone.request_access()
        except PermissionError as err:
            logger.warning("Microphone permission denied: %s", err)
            self._disable(UNAVAILABLE_MESSAGES[CaptureUnavailableReason.PERMISSION_DENIED])
            return False
        except OSError as err:
            logger.warning("Microphone unavailable: %s", err)
            self._disable(str(err) or UNAVAILABLE_MESSAGES[CaptureUnavailableReason.MICROPHONE_ERROR])
            return False
        finally:
            self._access_pending = False

        if self.state != SessionState.STARTING:
            # Stopped while the permission prompt was open
            self._microphone.release()
            return False

        self._mic_open = True
        self.state = SessionState.RECORDING
        try:
            self._recognizer.start(
                on_results=self.handle_results,
                on_error=self.handle_error,
                language=self._language,
            )
        except Exception as err:
            logger.error("Speech recognition failed to start: %s", err)
            self._mic_open = False
            self._microphone.release()
            self._disable(UNAVAILABLE_MESSAGES[CaptureUnavailableReason.RECOGNITION_UNAVAILABLE])
            return False
        return True

    def handle_results(self, results: Sequence[Sequence[str]]) -> None:
        """Replace the transcript with the best alternative of every result."""
        if not self.is_recording:
            return
        self.transcript = "".join(alternatives[0] for alternatives in results if alternatives)
        self._on_transcript(self.transcript)

    def handle_error(self, code: str) -> None:
        self.error = f"Speech recognition error: {code}"
        logger.warning(self.error)
        self.stop()

    def stop(self) -> None:
        """Release the microphone and halt recognition; safe to call repeatedly."""
        if self._mic_open:
            self._mic_open = False
            self._microphone.release()
        if self.state == SessionState.STARTING:
            self.state = SessionState.IDLE
        elif self.state == SessionState.RECORDING:
            self.state = SessionState.IDLE
            self._recognizer.stop()

    def edit_transcript(self, text: str) -> None:
        """Apply a manual correction while not recording."""
        if self.is_recording:
            raise ValueError("Cannot edit the transcript while recording")
        self.transcript = text
        self._on_transcript(text)

    def retry(self, environment: ClientEnvironment | None = None) -> CaptureAvailability:
        """Re-enable a disabled session, optionally with a fresh environment report."""
        if environment is not None:
            self._environment = environment
        availability = check_capture_support(self._environment)
        if self.state == SessionState.DISABLED:
            self.state = SessionState.IDLE
            self.error = None
        return availability

    def _disable(self, message: str | None) -> None:
        self.state = SessionState.DISABLED
        self.error = message
