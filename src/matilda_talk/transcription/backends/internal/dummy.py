from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..base import TranscriptionBackend
from ....core.params import TalkParams
from ....streaming.types import TranscriptResult


class DummyBackend(TranscriptionBackend):
    """Deterministic backend for tests and dry runs.

    Returns the scripted texts in order, repeating the last one once the
    script runs out. Window sizes of every call are recorded.
    """

    def __init__(
        self,
        params: TalkParams | None = None,
        *,
        texts: Sequence[str] = ("Hello world.",),
        confidence: float = 1.0,
    ) -> None:
        self._ready = False
        self._texts = list(texts) or [""]
        self._confidence = confidence
        self.calls: list[int] = []

    async def load(self):
        self._ready = True

    def transcribe(self, samples: np.ndarray) -> TranscriptResult:
        index = min(len(self.calls), len(self._texts) - 1)
        self.calls.append(len(samples))
        text = self._texts[index]
        return TranscriptResult(text=text, confidence=self._confidence if text else 0.0, latency_ms=0.0)

    @property
    def is_ready(self) -> bool:
        return self._ready
