"""
Speech Capture Adapter

Thin wrapper over the SpeechRecognition library. Only the output
contract matters to the rest of the tracker:

    start() -> zero or more interim transcripts
            -> one final transcript (if anything was understood)
            -> end-of-session signal

DESIGN DECISIONS:
- One session at a time. Starting while a session is active raises
  CaptureAlreadyActiveError; call stop() first for a clean restart.
- stop() cancels recognition still in flight and discards the interim
  transcripts already delivered. Only a final transcript is ever acted on.
- A missing microphone backend (no PyAudio, no input device) is detected
  up front. Voice entry is then simply unavailable; nothing else changes.
"""

import io
import threading
from typing import Any, Callable, Optional

import speech_recognition as sr
import structlog


logger = structlog.get_logger(__name__)


class SpeechCaptureError(Exception):
    """Base exception for speech capture."""
    pass


class SpeechUnavailableError(SpeechCaptureError):
    """No usable speech-to-text backend on this machine."""
    pass


class CaptureAlreadyActiveError(SpeechCaptureError):
    """start() was called while a capture session is running."""
    pass


def check_microphone_backend() -> None:
    """
    Raise SpeechUnavailableError unless a microphone can be opened.

    sr.Microphone needs PyAudio, which is an optional install.
    """
    try:
        names = sr.Microphone.list_microphone_names()
    except (AttributeError, OSError) as e:
        raise SpeechUnavailableError(f"Microphone backend missing: {e}") from e
    if not names:
        raise SpeechUnavailableError("No input device found")


TranscriptCallback = Callable[[str], None]


class SpeechCaptureAdapter:
    """
    Single-session speech capture.

    Callbacks run on the recognizer's background thread; keep them short.
    """

    def __init__(
        self,
        recognizer: Optional[Any] = None,
        microphone_factory: Optional[Callable[[], Any]] = None,
        availability_check: Callable[[], None] = check_microphone_backend,
        language: str = "en-US",
        phrase_time_limit: Optional[float] = 8.0,
        on_interim: Optional[TranscriptCallback] = None,
        on_final: Optional[TranscriptCallback] = None,
        on_end: Optional[Callable[[], None]] = None,
    ):
        self._recognizer = recognizer or sr.Recognizer()
        self._microphone_factory = microphone_factory or sr.Microphone
        self._availability_check = availability_check
        self._language = language
        self._phrase_time_limit = phrase_time_limit

        self._on_interim = on_interim
        self._on_final = on_final
        self._on_end = on_end

        self._lock = threading.Lock()
        self._available: Optional[bool] = None
        self._unavailable_reason: Optional[str] = None
        self._listening = False
        self._session = 0
        self._stopper: Optional[Callable[..., None]] = None
        self._interim: list[str] = []
        self._final: Optional[str] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_available(self) -> bool:
        """Check the platform once and remember the answer."""
        if self._available is None:
            try:
                self._availability_check()
                self._available = True
            except SpeechUnavailableError as e:
                self._available = False
                self._unavailable_reason = str(e)
                logger.info("speech_unavailable", reason=str(e))
        return self._available

    @property
    def unavailable_reason(self) -> Optional[str]:
        return self._unavailable_reason

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def interim_transcripts(self) -> list[str]:
        return list(self._interim)

    @property
    def final_transcript(self) -> Optional[str]:
        return self._final

    # -------------------------------------------------------------------------
    # Session control
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """
        Begin a capture session.

        Returns False when speech capture is unavailable or the microphone
        could not be opened.

        Raises:
            CaptureAlreadyActiveError: If a session is already running
        """
        if not self.is_available:
            return False

        with self._lock:
            if self._listening:
                raise CaptureAlreadyActiveError("Stop the current capture before starting a new one")
            self._session += 1
            session = self._session
            self._interim = []
            self._final = None
            self._listening = True

        def handle_audio(recognizer: Any, audio: Any) -> None:
            self._handle_audio(session, recognizer, audio)

        try:
            source = self._microphone_factory()
            stopper = self._recognizer.listen_in_background(
                source,
                handle_audio,
                phrase_time_limit=self._phrase_time_limit,
            )
        except (AttributeError, OSError) as e:
            with self._lock:
                self._listening = False
            logger.error("speech_capture_start_failed", error=str(e))
            return False

        with self._lock:
            if self._listening and self._session == session:
                self._stopper = stopper
                stopper = None
        if stopper is not None:
            # The session ended before listen_in_background returned.
            stopper(wait_for_stop=False)

        logger.info("speech_capture_started", session=session)
        return True

    def stop(self) -> None:
        """Cancel the running session, discarding interim results."""
        with self._lock:
            if not self._listening:
                return
            self._listening = False
            self._session += 1
            self._interim = []
            stopper, self._stopper = self._stopper, None

        if stopper is not None:
            stopper(wait_for_stop=False)
        logger.info("speech_capture_stopped")
        if self._on_end:
            self._on_end()

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def receive_transcript(
        self,
        text: str,
        is_final: bool = False,
        session: Optional[int] = None,
    ) -> bool:
        """
        Deliver a transcript for the current session.

        Streaming backends call this with is_final=False for partial
        results. Returns False when the transcript was dropped because
        the session it belongs to is over.
        """
        with self._lock:
            if not self._listening or (session is not None and session != self._session):
                return False
            if is_final:
                self._final = text
            else:
                self._interim.append(text)

        callback = self._on_final if is_final else self._on_interim
        if callback:
            callback(text)
        return True

    def finish(self, session: Optional[int] = None) -> None:
        """Signal end of session after the final transcript."""
        with self._lock:
            if not self._listening or (session is not None and session != self._session):
                return
            self._listening = False
            stopper, self._stopper = self._stopper, None

        if stopper is not None:
            stopper(wait_for_stop=False)
        if self._on_end:
            self._on_end()

    def _handle_audio(self, session: int, recognizer: Any, audio: Any) -> None:
        # One phrase per session, like a non-continuous browser recognizer.
        try:
            text = recognizer.recognize_google(audio, language=self._language)
        except sr.UnknownValueError:
            text = None
            logger.info("speech_not_understood", session=session)
        except sr.RequestError as e:
            text = None
            logger.error("speech_recognition_request_failed", session=session, error=str(e))

        if text:
            self.receive_transcript(text, is_final=True, session=session)
        self.finish(session)

    def transcribe_audio(self, audio_bytes: bytes) -> Optional[str]:
        """
        Transcribe a recorded clip (WAV, AIFF or FLAC).

        Returns None when nothing intelligible was said.

        Raises:
            SpeechCaptureError: If the clip cannot be decoded or the
                recognition service cannot be reached
        """
        try:
            with sr.AudioFile(io.BytesIO(audio_bytes)) as source:
                audio = self._recognizer.record(source)
        except (ValueError, EOFError) as e:
            raise SpeechCaptureError(f"Unsupported audio clip: {e}") from e

        try:
            return self._recognizer.recognize_google(audio, language=self._language)
        except sr.UnknownValueError:
            logger.info("speech_not_understood")
            return None
        except sr.RequestError as e:
            raise SpeechCaptureError(f"Speech recognition service failed: {e}") from e
