"""Bounded capture buffer with offset tracking.

Provides CaptureBuffer, the storage behind the live capture stream:
- Automatic trimming when the configured capture duration is exceeded
- "Last N samples" reads that never block the writer for long
- Offset tracking so cleared audio still counts toward stream time
"""

import logging
import threading

import numpy as np

from .conversion import int16_to_float32

logger = logging.getLogger(__name__)


class CaptureBuffer:
    """Sliding window of the most recently captured samples.

    One thread (the audio callback) appends while the talk loop reads and
    clears. All access goes through a lock.

    Example:
        buffer = CaptureBuffer(max_seconds=60.0, sample_rate=16000)
        buffer.append(audio_chunk)

        # Most recent 2 seconds for voice activity detection
        recent = buffer.latest(2 * 16000)

        # Forget everything finalized so far
        buffer.clear()

    """

    def __init__(self, max_seconds: float, sample_rate: int = 16000):
        """Initialize capture buffer.

        Args:
            max_seconds: Maximum buffer duration in seconds
            sample_rate: Audio sample rate in Hz

        """
        self.max_seconds = max_seconds
        self.sample_rate = sample_rate
        self.max_samples = int(max_seconds * sample_rate)

        self._lock = threading.Lock()
        self._buffer: np.ndarray = np.array([], dtype=np.float32)
        self._offset_samples: int = 0  # Samples dropped from the start
        self._total_samples: int = 0  # Total samples ever received

    @property
    def offset_seconds(self) -> float:
        """Stream time of the oldest buffered sample."""
        return self._offset_samples / self.sample_rate

    @property
    def duration_seconds(self) -> float:
        return self.samples_in_buffer / self.sample_rate

    @property
    def total_duration_seconds(self) -> float:
        """Total audio duration received (including dropped audio)."""
        return self._total_samples / self.sample_rate

    @property
    def samples_in_buffer(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, audio_chunk: np.ndarray) -> int:
        """Append audio chunk to buffer.

        Args:
            audio_chunk: Audio samples (float32 or int16)

        Returns:
            Number of samples trimmed (0 if no trimming occurred)

        """
        audio_chunk = int16_to_float32(audio_chunk)

        with self._lock:
            self._buffer = np.concatenate([self._buffer, audio_chunk])
            self._total_samples += len(audio_chunk)

            trimmed = 0
            if len(self._buffer) > self.max_samples:
                trimmed = len(self._buffer) - self.max_samples
                self._buffer = self._buffer[-self.max_samples :]
                self._offset_samples += trimmed

        return trimmed

    def latest(self, n_samples: int) -> np.ndarray:
        """Return a copy of the last n_samples (fewer if not enough audio yet)."""
        if n_samples <= 0:
            return np.array([], dtype=np.float32)
        with self._lock:
            return self._buffer[-n_samples:].copy()

    def clear(self) -> None:
        """Drop all buffered audio (keeps offset for continuity)."""
        with self._lock:
            self._offset_samples += len(self._buffer)
            self._buffer = np.array([], dtype=np.float32)
        logger.debug(f"Capture buffer cleared, offset now {self.offset_seconds:.2f}s")

    def reset(self) -> None:
        """Fully reset buffer including offset tracking."""
        with self._lock:
            self._buffer = np.array([], dtype=np.float32)
            self._offset_samples = 0
            self._total_samples = 0
