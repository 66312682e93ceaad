"""
Testing infrastructure with mock capabilities for the interview system.
"""
import asyncio
from typing import AsyncIterator, List, Optional, Sequence, Union

from .capabilities import SpeechInput, SpeechOutput, ManualInput, TranscriptEvent

# A scripted turn is either a list of events to emit, or SILENT (emit nothing
# until stopped), or an exception instance raised from start().
SILENT = None
ScriptedTurn = Union[Sequence[TranscriptEvent], None, Exception]


def final(text: str) -> TranscriptEvent:
    return TranscriptEvent(text, is_final=True)


def interim(text: str) -> TranscriptEvent:
    return TranscriptEvent(text, is_final=False)


class MockSpeechOutput(SpeechOutput):
    """Records utterances instead of playing them."""

    def __init__(self, delay: float = 0.0, fail: bool = False):
        self.delay = delay
        self.fail = fail
        self.spoken_messages: List[str] = []
        self.cancel_count = 0

    async def speak(self, text: str) -> None:
        self.spoken_messages.append(text)
        if self.fail:
            raise RuntimeError("mock speech output failure")
        if self.delay:
            await asyncio.sleep(self.delay)

    def cancel(self) -> None:
        self.cancel_count += 1


class MockSpeechInput(SpeechInput):
    """
    Replays one scripted turn per start() call.

    Turns past the end of the script behave like SILENT.
    """

    def __init__(self, turns: Sequence[ScriptedTurn], available: bool = True):
        self.turns = list(turns)
        self.available = available
        self.start_count = 0
        self.stop_count = 0
        self.streams_closed = 0
        self._stopped: Optional[asyncio.Event] = None
        self._start_waiters: List[tuple] = []

    def start(self) -> AsyncIterator[TranscriptEvent]:
        idx = self.start_count
        self.start_count += 1
        turn = self.turns[idx] if idx < len(self.turns) else SILENT
        self._notify_started()
        if isinstance(turn, Exception):
            raise turn
        self._stopped = asyncio.Event()
        return self._replay(turn, self._stopped)

    def stop(self) -> None:
        self.stop_count += 1
        if self._stopped is not None:
            self._stopped.set()

    async def wait_for_start(self, count: int) -> None:
        """Wait until start() has been called ``count`` times."""
        if self.start_count >= count:
            return
        future = asyncio.get_running_loop().create_future()
        self._start_waiters.append((count, future))
        await future

    def _notify_started(self) -> None:
        for count, future in list(self._start_waiters):
            if self.start_count >= count and not future.done():
                future.set_result(None)
                self._start_waiters.remove((count, future))

    async def _replay(self, turn: Optional[Sequence[TranscriptEvent]],
                      stopped: asyncio.Event) -> AsyncIterator[TranscriptEvent]:
        try:
            for event in turn or ():
                await asyncio.sleep(0)
                if stopped.is_set():
                    return
                yield event
            if turn is SILENT:
                await stopped.wait()
        finally:
            self.streams_closed += 1


class MockManualInput(ManualInput):
    """Returns scripted typed answers in order; None once exhausted."""

    def __init__(self, answers: Sequence[Optional[str]] = ()):
        self.answers = list(answers)
        self.prompts: List[str] = []

    async def prompt(self, message: str) -> Optional[str]:
        self.prompts.append(message)
        if len(self.prompts) <= len(self.answers):
            return self.answers[len(self.prompts) - 1]
        return None
