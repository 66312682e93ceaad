"""
Text-to-speech using Google Cloud TTS, played through PyAudio.
"""
import asyncio
import io
import logging
import threading
import wave
from typing import Optional

import pyaudio
from google.cloud import texttospeech

from .credentials import load_credentials
from ..audio.processing import pcm16_to_float, apply_gain, float_to_pcm16
from ...config import (
    TTS_VOICE, LANGUAGE_CODE, SPEAKER_VOLUME,
    SPEAKER_SAMPLE_RATE, SPEAKER_CHUNK_SAMPLES
)
from ...interview.capabilities import SpeechOutput
from ...utils import with_suppressed_audio_warnings

logger = logging.getLogger("speech_tts")


class GoogleSpeechOutput(SpeechOutput):
    """
    Speaks utterances one at a time. Synthesis and playback run in a worker
    thread; ``cancel()`` halts playback at the next audio chunk.
    Failures are logged and the text is printed instead.
    """

    def __init__(self,
                 voice: str = TTS_VOICE,
                 language_code: str = LANGUAGE_CODE,
                 volume: float = SPEAKER_VOLUME,
                 credentials_json: Optional[str] = None,
                 sample_rate: int = SPEAKER_SAMPLE_RATE):
        self.voice = voice
        self.language_code = language_code
        self.volume = max(0.0, min(1.0, volume))
        self.credentials_json = credentials_json
        self.sample_rate = sample_rate
        self._client: Optional[texttospeech.TextToSpeechClient] = None
        self._client_error: Optional[Exception] = None
        self._cancelled: Optional[threading.Event] = None

    @property
    def available(self) -> bool:
        if self._client is None and self._client_error is None:
            try:
                self._client = texttospeech.TextToSpeechClient(
                    credentials=load_credentials(self.credentials_json)
                )
            except Exception as e:
                logger.warning(f"Google TTS unavailable: {e}")
                self._client_error = e
        return self._client is not None

    async def speak(self, text: str) -> None:
        if not text.strip():
            return
        if not self.available:
            logger.info("TTS unsupported, printing instead")
            print(f"🤖 {text}")
            return

        cancelled = threading.Event()
        self._cancelled = cancelled
        try:
            await asyncio.to_thread(self._speak_blocking, text, cancelled)
        except Exception as e:
            logger.error(f"Google TTS failed: {e}")
            print(f"🤖 {text}")
        finally:
            if self._cancelled is cancelled:
                self._cancelled = None

    def cancel(self) -> None:
        if self._cancelled is not None:
            logger.info("Cancelling speech output")
            self._cancelled.set()

    def synthesize(self, text: str) -> bytes:
        """Synthesize text to raw mono PCM16 at ``sample_rate``."""
        response = self._client.synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(
                language_code=self.language_code,
                name=self.voice
            ),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.LINEAR16,
                sample_rate_hertz=self.sample_rate
            ),
        )
        # LINEAR16 responses carry a WAV header
        with wave.open(io.BytesIO(response.audio_content), "rb") as wf:
            return wf.readframes(wf.getnframes())

    def _speak_blocking(self, text: str, cancelled: threading.Event) -> None:
        pcm = self.synthesize(text)
        if cancelled.is_set():
            return
        pcm = float_to_pcm16(apply_gain(pcm16_to_float(pcm), self.volume))
        logger.info(f"Avatar speaks: {text[:60]}")
        self._play(pcm, cancelled)

    @with_suppressed_audio_warnings
    def _play(self, pcm: bytes, cancelled: threading.Event) -> None:
        pa = pyaudio.PyAudio()
        stream = None
        try:
            stream = pa.open(format=pyaudio.paInt16, channels=1, rate=self.sample_rate, output=True)
            chunk_bytes = SPEAKER_CHUNK_SAMPLES * 2
            for offset in range(0, len(pcm), chunk_bytes):
                if cancelled.is_set():
                    logger.info("Playback cancelled")
                    break
                stream.write(pcm[offset:offset + chunk_bytes])
        finally:
            if stream is not None:
                stream.stop_stream()
                stream.close()
            pa.terminate()
