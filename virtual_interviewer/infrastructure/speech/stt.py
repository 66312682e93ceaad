"""
Streaming speech-to-text using Google Cloud Speech and the microphone.
"""
import asyncio
import logging
import threading
from typing import AsyncIterator, Callable, Optional

from google.cloud import speech

from .credentials import load_credentials
from ..audio.microphone import MicrophoneStream
from ...config import LANGUAGE_CODE
from ...interview.capabilities import SpeechInput, TranscriptEvent

logger = logging.getLogger("speech_stt")


class GoogleSpeechInput(SpeechInput):
    """
    Streams microphone audio to ``streaming_recognize`` on a worker thread and
    hands interim/final results to the event loop as TranscriptEvents.
    """

    def __init__(self,
                 language_code: str = LANGUAGE_CODE,
                 credentials_json: Optional[str] = None,
                 microphone_factory: Callable[[], MicrophoneStream] = MicrophoneStream):
        self.language_code = language_code
        self.credentials_json = credentials_json
        self.microphone_factory = microphone_factory
        self._client: Optional[speech.SpeechClient] = None
        self._client_error: Optional[Exception] = None
        self._mic: Optional[MicrophoneStream] = None

    @property
    def available(self) -> bool:
        if self._client is None and self._client_error is None:
            try:
                self._client = speech.SpeechClient(credentials=load_credentials(self.credentials_json))
            except Exception as e:
                logger.warning(f"Google Speech-to-Text unavailable: {e}")
                self._client_error = e
        return self._client is not None

    def start(self) -> AsyncIterator[TranscriptEvent]:
        if self._mic is not None and not self._mic.closed:
            raise RuntimeError("Recognition already started")
        if not self.available:
            raise RuntimeError("Speech-to-Text client not available")

        loop = asyncio.get_running_loop()
        events: "asyncio.Queue[Optional[TranscriptEvent]]" = asyncio.Queue()

        mic = self.microphone_factory()
        mic.open()
        self._mic = mic

        worker = threading.Thread(
            target=self._recognize, args=(mic, loop, events),
            name="speech-recognition", daemon=True
        )
        worker.start()
        logger.info("Recognition started")
        return self._drain(events)

    def stop(self) -> None:
        if self._mic is not None and not self._mic.closed:
            logger.info("Stopping recognition")
            self._mic.close()

    def _recognize(self, mic: MicrophoneStream, loop: asyncio.AbstractEventLoop,
                   events: "asyncio.Queue[Optional[TranscriptEvent]]") -> None:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=mic.sr_target,
            language_code=self.language_code,
            enable_automatic_punctuation=True,
            max_alternatives=1,
        )
        streaming_config = speech.StreamingRecognitionConfig(config=config, interim_results=True)
        requests = (speech.StreamingRecognizeRequest(audio_content=chunk) for chunk in mic.chunks())

        try:
            responses = self._client.streaming_recognize(config=streaming_config, requests=requests)
            for response in responses:
                for result in response.results:
                    if not result.alternatives:
                        continue
                    event = TranscriptEvent(result.alternatives[0].transcript, bool(result.is_final))
                    self._post(loop, events, event)
        except Exception as e:
            if not mic.closed:
                logger.error(f"Recognition error: {e}")
        finally:
            mic.close()
            logger.info("Recognition ended.")
            self._post(loop, events, None)

    @staticmethod
    def _post(loop: asyncio.AbstractEventLoop,
              events: "asyncio.Queue[Optional[TranscriptEvent]]",
              item: Optional[TranscriptEvent]) -> None:
        try:
            loop.call_soon_threadsafe(events.put_nowait, item)
        except RuntimeError:
            # Event loop already closed
            pass

    @staticmethod
    async def _drain(events: "asyncio.Queue[Optional[TranscriptEvent]]") -> AsyncIterator[TranscriptEvent]:
        while True:
            event = await events.get()
            if event is None:
                return
            yield event
