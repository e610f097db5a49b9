"""Segment processor.

Runs once per detected-activity tick: transcribes the voice window, decides
between a final and a partial result, and keeps the sample carryover that
links one final segment to the next.
"""

import asyncio
import logging

import numpy as np

from ..audio.window import AudioWindowManager, SampleWindow
from ..core.params import TalkParams
from ..transcription.backends.base import TranscriptionBackend
from .cleanup import clean_transcript
from .dispatcher import OutputDispatcher
from .endpoint import EndpointDetector
from .sentences import split_sentences
from .types import Detection, SegmentOutcome, SegmentReport, SegmentState

logger = logging.getLogger(__name__)


class SegmentProcessor:
    """Turns detected activity into partial and final transcript events.

    The processor owns the carryover samples. SegmentState is owned by the
    caller and mutated in place.
    """

    def __init__(
        self,
        windows: AudioWindowManager,
        backend: TranscriptionBackend,
        dispatcher: OutputDispatcher,
        detector: EndpointDetector,
        params: TalkParams,
    ):
        self.windows = windows
        self.backend = backend
        self.dispatcher = dispatcher
        self.detector = detector
        self.params = params

        self._carryover = np.array([], dtype=np.float32)

    @property
    def carryover_samples(self) -> int:
        return len(self._carryover)

    async def process(self, state: SegmentState, detection: Detection) -> SegmentReport:
        """Process one tick on which the detector reported activity."""
        voice = self.windows.get_window(self.params.voice_ms)
        if self.windows.is_full(voice) and len(self._carryover):
            logger.debug("Voice window is full, dropping carryover")
            self._carryover = np.array([], dtype=np.float32)

        combined = self.windows.prepend_carryover(voice, self._carryover)

        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(None, self.backend.transcribe_window, combined)
        text = clean_transcript(result.text)

        report = SegmentReport(
            outcome=SegmentOutcome.SILENT,
            text=text,
            window_samples=len(combined),
            carryover_samples=len(self._carryover),
            result=result,
        )

        if not text:
            logger.debug(f"Heard nothing in {len(combined)} samples")
            return report

        if text == state.last_partial_text:
            report.outcome = SegmentOutcome.REPEAT
            return report

        forced = len(text) > self.params.max_chars
        if detection.detected_end or forced:
            if forced and not detection.detected_end:
                logger.debug(f"Forcing final at {len(text)} characters")
            report.forced_final = forced and not detection.detected_end
            await self._finalize(state, voice, text, report)
        else:
            await self.dispatcher.dispatch_partial(text)
            state.last_partial_text = text
            state.adaptive_threshold = self.detector.loosen(state.adaptive_threshold)
            report.outcome = SegmentOutcome.PARTIAL

        logger.debug(
            f"{report.outcome.value}: {text!r} "
            f"(confidence={result.confidence:.2f}, latency={result.latency_ms:.0f}ms, "
            f"threshold={state.adaptive_threshold:.3f})"
        )
        return report

    async def _finalize(self, state: SegmentState, voice: SampleWindow, text: str, report: SegmentReport) -> None:
        split = split_sentences(text, state.text_carryover)
        await self.dispatcher.dispatch_final(split.sentences)
        state.text_carryover = split.carryover

        fresh = self.windows.get_window(self.params.voice_ms)
        self.windows.clear()
        self._carryover = self._next_carryover(voice, fresh)

        state.last_partial_text = ""
        state.adaptive_threshold = self.detector.reset()

        report.outcome = SegmentOutcome.FINAL
        report.sentences = split.sentences

    def _next_carryover(self, old: SampleWindow, fresh: SampleWindow) -> np.ndarray:
        """Audio that arrived while the final segment was being transcribed."""
        delta = len(fresh) - len(old)
        if delta > 0 and not self.windows.is_full(old) and not self.windows.is_full(fresh):
            return fresh.tail(delta)
        return np.array([], dtype=np.float32)
