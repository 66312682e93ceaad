"""
Basic audio processing: format conversions, resampling and gain.
"""
from math import gcd

import numpy as np
from scipy.signal import resample_poly

from ...config import SAMPLE_RATE_TARGET


def pcm16_to_float(pcm: bytes, channels: int = 1) -> np.ndarray:
    """Decode little-endian PCM16 bytes to float32 samples in [-1, 1], shape (n, channels)."""
    samples = np.frombuffer(pcm, dtype=np.int16).astype(np.float32) / 32768.0
    return samples.reshape(-1, channels)


def float_to_pcm16(audio: np.ndarray) -> bytes:
    """Encode float samples in [-1, 1] as PCM16 bytes, clipping out-of-range values."""
    return np.clip(audio * 32767, -32768, 32767).astype(np.int16).tobytes()


def stereo_to_mono(x: np.ndarray) -> np.ndarray:
    """Convert multi-channel audio to mono by averaging channels."""
    if x.ndim == 1:
        return x
    return np.mean(x, axis=1)


def remove_dc(x: np.ndarray) -> np.ndarray:
    """Remove DC offset from audio signal."""
    if x.size == 0:
        return x
    return x - np.mean(x)


def resample(mono: np.ndarray, sr_from: int, sr_to: int = SAMPLE_RATE_TARGET) -> np.ndarray:
    """Resample mono audio between integer sample rates."""
    if sr_from == sr_to:
        return mono.astype(np.float32)
    g = gcd(sr_from, sr_to)
    return resample_poly(mono, up=sr_to // g, down=sr_from // g).astype(np.float32)


def apply_gain(audio: np.ndarray, gain: float) -> np.ndarray:
    """Scale samples by a linear gain factor."""
    return audio * float(gain)


def microphone_chunk_to_stt(chunk: bytes, channels: int, sr_capture: int,
                            gain: float = 1.0, sr_target: int = SAMPLE_RATE_TARGET) -> bytes:
    """Convert one raw microphone buffer to the mono PCM16 stream the recognizer expects."""
    audio = stereo_to_mono(pcm16_to_float(chunk, channels))
    audio = remove_dc(audio)
    audio = resample(audio, sr_capture, sr_target)
    return float_to_pcm16(apply_gain(audio, gain))
