"""
Contracts for the speech and manual-input collaborators.

Concrete Google Cloud / PyAudio implementations live in
``virtual_interviewer.infrastructure.speech``; mocks live in ``testing``.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Optional

logger = logging.getLogger("capabilities")


@dataclass(frozen=True)
class TranscriptEvent:
    """One recognition result: interim (still changing) or final."""
    text: str
    is_final: bool = False


class SpeechOutput(ABC):
    """Text-to-speech capability. Only one utterance may play at a time."""

    available: bool = True

    @abstractmethod
    async def speak(self, text: str) -> None:
        """Play an utterance; returns when playback ends. Must not raise for playback errors."""

    def cancel(self) -> None:
        """Halt any utterance in progress."""


class SpeechInput(ABC):
    """Streaming speech-to-text capability."""

    available: bool = True

    @abstractmethod
    def start(self) -> AsyncIterator[TranscriptEvent]:
        """
        Start listening.

        Returns:
            Async iterator of transcript events, exhausted once the engine stops

        Raises:
            RuntimeError: If the engine cannot be started
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop listening and release the input stream. Safe to call repeatedly."""


class ManualInput(ABC):
    """Typed-answer fallback."""

    @abstractmethod
    async def prompt(self, message: str) -> Optional[str]:
        """Ask for a typed answer; None when cancelled."""


class ConsoleSpeechOutput(SpeechOutput):
    """Log-only speech output used when TTS is disabled or unsupported."""

    available = False

    def __init__(self, prefix: str = "🤖", echo: bool = True):
        self.prefix = prefix
        self.echo = echo

    async def speak(self, text: str) -> None:
        logger.info(f"TTS disabled, printing: {text}")
        if self.echo:
            print(f"{self.prefix} {text}")


class ConsoleManualInput(ManualInput):
    """Reads a typed answer from stdin without blocking the event loop."""

    async def prompt(self, message: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(input, f"⌨️  {message} ")
        except (EOFError, KeyboardInterrupt):
            logger.info("Typed answer cancelled")
            return None
