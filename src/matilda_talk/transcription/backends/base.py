import logging
from abc import ABC, abstractmethod

import numpy as np

from ...audio.window import SampleWindow
from ...streaming.types import TalkError, TranscriptResult

logger = logging.getLogger(__name__)


class BackendNotAvailableError(TalkError):
    """Raised when a backend's dependencies are not installed."""


class TranscriptionBackend(ABC):
    """Abstract base class for transcription backends.

    Backends transcribe one window of 16 kHz mono float32 samples at a time
    and keep no state between calls.
    """

    @abstractmethod
    async def load(self):
        """Load the model asynchronously."""

    @abstractmethod
    def transcribe(self, samples: np.ndarray) -> TranscriptResult:
        """Transcribe a window of samples.

        May raise; callers in the talk loop use transcribe_window() instead.
        """

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Check if the backend is ready/loaded."""

    def transcribe_window(self, window: SampleWindow) -> TranscriptResult:
        """Transcribe a window, turning any engine failure into an empty result."""
        if window.is_empty:
            return TranscriptResult.empty()
        try:
            return self.transcribe(window.samples)
        except Exception as e:
            logger.error(f"Transcription failed for {len(window)} samples: {e}")
            return TranscriptResult.empty()
