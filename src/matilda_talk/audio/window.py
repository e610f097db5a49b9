"""Rolling audio windows over the live capture stream.

Provides:
- SampleWindow: an immutable slice of captured audio
- AudioWindowManager: pulls windows from the capture stream and joins
  carryover audio onto them
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np

logger = logging.getLogger(__name__)


class AudioSource(Protocol):
    """What the window manager needs from a capture stream."""

    def get(self, duration_ms: int) -> np.ndarray: ...

    def clear(self) -> None: ...


def _frozen(samples: np.ndarray) -> np.ndarray:
    array = np.array(samples, dtype=np.float32, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class SampleWindow:
    """Ordered float32 samples at a fixed sample rate."""

    samples: np.ndarray
    sample_rate: int = 16000

    @classmethod
    def from_samples(cls, samples: np.ndarray, sample_rate: int = 16000) -> "SampleWindow":
        return cls(samples=_frozen(samples), sample_rate=sample_rate)

    @classmethod
    def empty(cls, sample_rate: int = 16000) -> "SampleWindow":
        return cls.from_samples(np.array([], dtype=np.float32), sample_rate)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    @property
    def duration_ms(self) -> float:
        return len(self.samples) * 1000.0 / self.sample_rate

    def tail(self, n_samples: int) -> np.ndarray:
        """Copy of the last n_samples (empty for n_samples <= 0)."""
        if n_samples <= 0:
            return np.array([], dtype=np.float32)
        return self.samples[-n_samples:].copy()


class AudioWindowManager:
    """Extracts fixed-duration windows from a capture stream.

    max_window_samples is the sample count of a full voice window; it is the
    upper bound for any carryover joined onto a window.
    """

    def __init__(self, source: AudioSource, sample_rate: int, max_window_samples: int):
        self.source = source
        self.sample_rate = sample_rate
        self.max_window_samples = max_window_samples

    def get_window(self, duration_ms: int) -> SampleWindow:
        """Most recent duration_ms of audio; shorter when less is available."""
        samples = self.source.get(duration_ms)
        if samples is None:
            return SampleWindow.empty(self.sample_rate)
        return SampleWindow.from_samples(samples, self.sample_rate)

    def clear(self) -> None:
        """Discard everything captured so far."""
        self.source.clear()

    def is_full(self, window: SampleWindow) -> bool:
        return len(window) >= self.max_window_samples

    def prepend_carryover(self, window: SampleWindow, carryover: np.ndarray) -> SampleWindow:
        """Join carryover samples in front of window when there are any."""
        if carryover is None or len(carryover) == 0:
            return window
        if len(carryover) > self.max_window_samples:
            logger.warning(
                f"Carryover of {len(carryover)} samples exceeds window bound {self.max_window_samples}, truncating"
            )
            carryover = carryover[-self.max_window_samples :]
        return SampleWindow.from_samples(np.concatenate([carryover, window.samples]), window.sample_rate)
