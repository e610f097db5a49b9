"""Type definitions for the talk segmentation loop.

Provides:
- TranscriptResult: Engine output for one window
- Detection: Endpoint detector verdict for one tick
- SegmentState: Mutable state carried between ticks
- SegmentOutcome / SegmentReport: What a processed tick did
- TalkStats: Loop counters
- TalkError: Base exception for startup failures
"""

from dataclasses import dataclass, field
from enum import Enum


class Channel(Enum):
    """Named output endpoints."""

    FINAL = "final"
    PARTIAL = "partial"


@dataclass(frozen=True)
class TranscriptResult:
    """Result of one transcription engine call.

    confidence is the mean per-token probability, 0.0 when no tokens were produced.
    """

    text: str = ""
    confidence: float = 0.0
    latency_ms: float = 0.0

    @classmethod
    def empty(cls, latency_ms: float = 0.0) -> "TranscriptResult":
        return cls(text="", confidence=0.0, latency_ms=latency_ms)


@dataclass(frozen=True)
class Detection:
    """Voice activity verdict for the current look-back window."""

    detected_end: bool = False
    detected_pause: bool = False

    @property
    def triggered(self) -> bool:
        return self.detected_end or self.detected_pause


@dataclass
class SegmentState:
    """State carried from one processed segment to the next.

    A single instance lives for the whole conversation and is passed
    explicitly into SegmentProcessor.process().
    """

    adaptive_threshold: float
    last_partial_text: str = ""
    text_carryover: str = ""

    @classmethod
    def initial(cls, final_threshold: float) -> "SegmentState":
        return cls(adaptive_threshold=final_threshold)


class SegmentOutcome(Enum):
    """What happened to a detected-activity tick."""

    SILENT = "silent"  # engine heard nothing
    REPEAT = "repeat"  # same text as the last partial
    PARTIAL = "partial"
    FINAL = "final"


@dataclass
class SegmentReport:
    """Summary of a processed tick, mainly for logging and tests."""

    outcome: SegmentOutcome
    text: str = ""
    sentences: list[str] = field(default_factory=list)
    window_samples: int = 0
    carryover_samples: int = 0
    forced_final: bool = False
    result: TranscriptResult | None = None


@dataclass
class TalkStats:
    """Counters for a talk session, logged at shutdown."""

    ticks: int = 0
    detections: int = 0
    transcriptions: int = 0
    silent: int = 0
    repeats: int = 0
    partials: int = 0
    finals: int = 0
    forced_finals: int = 0
    sentences: int = 0
    failed_posts: int = 0
    total_latency_ms: float = 0.0

    def record(self, report: SegmentReport) -> None:
        self.transcriptions += 1
        if report.result is not None:
            self.total_latency_ms += report.result.latency_ms
        if report.outcome == SegmentOutcome.SILENT:
            self.silent += 1
        elif report.outcome == SegmentOutcome.REPEAT:
            self.repeats += 1
        elif report.outcome == SegmentOutcome.PARTIAL:
            self.partials += 1
        else:
            self.finals += 1
            self.sentences += len(report.sentences)
            if report.forced_final:
                self.forced_finals += 1

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "ticks": self.ticks,
            "detections": self.detections,
            "transcriptions": self.transcriptions,
            "silent": self.silent,
            "repeats": self.repeats,
            "partials": self.partials,
            "finals": self.finals,
            "forced_finals": self.forced_finals,
            "sentences": self.sentences,
            "failed_posts": self.failed_posts,
            "avg_latency_ms": (
                self.total_latency_ms / self.transcriptions if self.transcriptions > 0 else 0.0
            ),
        }


class TalkError(Exception):
    """Base exception for Matilda Talk startup failures."""


class ConfigError(TalkError):
    """Raised when a configuration value is unknown or out of range."""

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class CaptureError(TalkError):
    """Raised when the audio capture device cannot be opened."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)
