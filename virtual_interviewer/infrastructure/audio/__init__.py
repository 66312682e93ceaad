"""
Audio capture and processing.

- processing: sample conversions, resampling and gain (numpy/scipy)
- microphone: PyAudio input stream, imported lazily
"""

from .processing import (
    pcm16_to_float,
    float_to_pcm16,
    stereo_to_mono,
    remove_dc,
    resample,
    apply_gain,
    microphone_chunk_to_stt
)


# Lazy import for MicrophoneStream to avoid a pyaudio dependency at import time
def __getattr__(name):
    if name == "MicrophoneStream":
        from .microphone import MicrophoneStream
        return MicrophoneStream
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "MicrophoneStream",
    "pcm16_to_float",
    "float_to_pcm16",
    "stereo_to_mono",
    "remove_dc",
    "resample",
    "apply_gain",
    "microphone_chunk_to_stt"
]
