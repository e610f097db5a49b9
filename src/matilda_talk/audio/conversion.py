"""Audio conversion helpers for PCM scaling."""

import numpy as np


def int16_to_float32(audio: np.ndarray) -> np.ndarray:
    """Convert int16 PCM to float32 in [-1.0, 1.0]."""
    if audio.dtype == np.int16:
        return audio.astype(np.float32) / 32768.0
    return audio.astype(np.float32)


def pcm_bytes_to_float32(data: bytes) -> np.ndarray:
    """Decode little-endian int16 PCM bytes as produced by PyAudio."""
    return int16_to_float32(np.frombuffer(data, dtype=np.int16))
