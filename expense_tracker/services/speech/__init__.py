"""Speech capture package."""

from expense_tracker.services.speech.capture import (
    CaptureAlreadyActiveError,
    SpeechCaptureAdapter,
    SpeechCaptureError,
    SpeechUnavailableError,
    check_microphone_backend,
)

__all__ = [
    "CaptureAlreadyActiveError",
    "SpeechCaptureAdapter",
    "SpeechCaptureError",
    "SpeechUnavailableError",
    "check_microphone_backend",
]
