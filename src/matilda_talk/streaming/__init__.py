"""Streaming segmentation: endpoint detection, segment processing and dispatch."""

from importlib import import_module
from typing import TYPE_CHECKING

from .cleanup import clean_transcript
from .sentences import SplitResult, split_sentences
from .types import (
    CaptureError,
    Channel,
    ConfigError,
    Detection,
    SegmentOutcome,
    SegmentReport,
    SegmentState,
    TalkError,
    TalkStats,
    TranscriptResult,
)

if TYPE_CHECKING:
    from .dispatcher import OutputDispatcher
    from .endpoint import EndpointDetector
    from .processor import SegmentProcessor

__all__ = [
    "CaptureError",
    "Channel",
    "ConfigError",
    "Detection",
    "EndpointDetector",
    "OutputDispatcher",
    "SegmentOutcome",
    "SegmentProcessor",
    "SegmentReport",
    "SegmentState",
    "SplitResult",
    "TalkError",
    "TalkStats",
    "TranscriptResult",
    "clean_transcript",
    "split_sentences",
]

# Imported on first use; processor depends on core.params, which imports .types
_LAZY_EXPORTS = {
    "EndpointDetector": (".endpoint", "EndpointDetector"),
    "OutputDispatcher": (".dispatcher", "OutputDispatcher"),
    "SegmentProcessor": (".processor", "SegmentProcessor"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
