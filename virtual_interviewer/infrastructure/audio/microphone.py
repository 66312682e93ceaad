"""
PyAudio microphone stream yielding recognizer-ready audio chunks.
"""
import logging
import queue
from typing import Iterator, Optional

import pyaudio

from .processing import microphone_chunk_to_stt
from ...config import CHANNELS, SAMPLE_RATE_CAPTURE, SAMPLE_RATE_TARGET, FRAME_MS, MIC_GAIN
from ...utils import with_suppressed_audio_warnings

logger = logging.getLogger("microphone")


class MicrophoneStream:
    """
    Opens the input device and buffers audio from the PyAudio callback thread.

    ``chunks()`` blocks for audio and ends once ``close()`` is called, which
    is what ends a streaming recognition request.
    """

    def __init__(self,
                 input_device: Optional[int] = None,
                 num_channels: int = CHANNELS,
                 sr_capture: int = SAMPLE_RATE_CAPTURE,
                 sr_target: int = SAMPLE_RATE_TARGET,
                 frame_ms: int = FRAME_MS,
                 mic_gain: float = MIC_GAIN):
        self.input_device = input_device
        self.num_channels = num_channels
        self.sr_capture = sr_capture
        self.sr_target = sr_target
        self.frame_size = int(sr_capture * frame_ms / 1000)
        self.mic_gain = mic_gain
        self._buffer: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self._pa: Optional[pyaudio.PyAudio] = None
        self._stream = None
        self.closed = True

    @with_suppressed_audio_warnings
    def open(self) -> None:
        """Open the device. Raises if no usable input device exists."""
        self._pa = pyaudio.PyAudio()
        try:
            self._stream = self._pa.open(
                format=pyaudio.paInt16,
                channels=self.num_channels,
                rate=self.sr_capture,
                input=True,
                input_device_index=self.input_device,
                frames_per_buffer=self.frame_size,
                stream_callback=self._fill_buffer,
            )
        except Exception:
            self._pa.terminate()
            self._pa = None
            raise
        self.closed = False
        logger.info(f"Microphone opened (device={self.input_device}, {self.num_channels}ch @ {self.sr_capture} Hz)")

    def _fill_buffer(self, in_data, frame_count, time_info, status_flags):
        self._buffer.put(in_data)
        return None, pyaudio.paContinue

    def close(self) -> None:
        """Stop recording and release the device. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        try:
            if self._stream is not None:
                self._stream.stop_stream()
                self._stream.close()
        except Exception as e:
            logger.warning(f"Error closing microphone stream: {e}")
        finally:
            self._stream = None
            if self._pa is not None:
                self._pa.terminate()
                self._pa = None
            # Unblock the consumer
            self._buffer.put(None)
        logger.info("Microphone closed")

    def chunks(self) -> Iterator[bytes]:
        """Yield converted audio until the stream is closed."""
        while not self.closed:
            chunk = self._buffer.get()
            if chunk is None:
                return
            data = [chunk]
            # Drain whatever else is already buffered
            while True:
                try:
                    chunk = self._buffer.get(block=False)
                except queue.Empty:
                    break
                if chunk is None:
                    self.closed = True
                    break
                data.append(chunk)
            yield microphone_chunk_to_stt(
                b"".join(data), self.num_channels, self.sr_capture,
                gain=self.mic_gain, sr_target=self.sr_target
            )
