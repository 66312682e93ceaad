"""
Answer capture: one answer-collection turn with timeout and typed fallback.
"""
import asyncio
import logging
import time
from typing import AsyncIterator, Optional

from .capabilities import SpeechInput, ManualInput, TranscriptEvent
from .events import (
    InterviewEventBus, TranscriptUpdatedEvent, CaptureTimedOutEvent,
    CaptureFallbackEvent, ErrorOccurredEvent
)
from ..config import ANSWER_TIMEOUT_SECONDS

logger = logging.getLogger("answer_capture")


class AnswerCapture:
    """
    Collects one answer per call.

    With a working speech input the first non-empty final transcript wins,
    raced against a timeout; the loser is cancelled and the engine stopped
    either way. Without one (or when it fails to start) the answer is typed.
    """

    def __init__(self,
                 speech_input: Optional[SpeechInput],
                 manual_input: ManualInput,
                 event_bus: Optional[InterviewEventBus] = None,
                 timeout_seconds: float = ANSWER_TIMEOUT_SECONDS):
        self.speech_input = speech_input
        self.manual_input = manual_input
        self.event_bus = event_bus or InterviewEventBus()
        self.timeout_seconds = timeout_seconds
        self._active = False

    @property
    def active(self) -> bool:
        """True while a spoken capture is in progress."""
        return self._active

    async def capture(self, prompt_text: str, session_id: str = "unknown") -> str:
        """
        Collect an answer for the given prompt.

        Args:
            prompt_text: The question being answered (shown by the typed fallback)
            session_id: Session the answer belongs to, for events

        Returns:
            The answer text, "" when nothing was said or typed
        """
        if self.speech_input is None or not self.speech_input.available:
            return await self._manual(prompt_text, session_id,
                                      "Speech recognition not supported")

        try:
            stream = self.speech_input.start()
        except Exception as e:
            logger.warning(f"Recognition start error, using typed fallback: {e}")
            self.event_bus.emit(ErrorOccurredEvent(
                session_id, time.time(), type(e).__name__, str(e), "speech_input"
            ))
            return await self._manual(prompt_text, session_id, "Recognition start error")

        self._active = True
        try:
            answer = await asyncio.wait_for(
                self._first_final(stream, session_id), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.info(f"No response detected (timeout after {self.timeout_seconds:.1f}s)")
            self.event_bus.emit(CaptureTimedOutEvent(session_id, time.time(), self.timeout_seconds))
            answer = ""
        finally:
            self._active = False
            self.cancel()
            await self._close_stream(stream)

        logger.info(f"Captured answer: {answer or '(empty)'}")
        return answer

    def cancel(self) -> None:
        """Stop the speech input engine; a no-op when nothing is listening."""
        if self.speech_input is None:
            return
        try:
            self.speech_input.stop()
        except Exception as e:
            logger.warning(f"Error stopping speech input: {e}")

    @staticmethod
    async def _close_stream(stream: AsyncIterator[TranscriptEvent]) -> None:
        aclose = getattr(stream, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception as e:
            logger.warning(f"Error closing transcript stream: {e}")

    async def _first_final(self, stream: AsyncIterator[TranscriptEvent], session_id: str) -> str:
        async for event in stream:
            interim = "" if event.is_final else event.text
            final = event.text if event.is_final else ""
            self.event_bus.emit(TranscriptUpdatedEvent(session_id, time.time(), interim, final))
            if event.is_final and event.text.strip():
                return event.text.strip()
        logger.info("Recognition ended without a final transcript")
        return ""

    async def _manual(self, prompt_text: str, session_id: str, reason: str) -> str:
        logger.info(f"{reason}; requesting typed answer")
        self.event_bus.emit(CaptureFallbackEvent(session_id, time.time(), reason))
        typed = await self.manual_input.prompt(f"{reason}. Type your answer to: {prompt_text}")
        return typed or ""
