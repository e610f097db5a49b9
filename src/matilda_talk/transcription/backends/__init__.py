"""Transcription backends package.

Supported backends:
- faster_whisper: Whisper with CUDA/CPU support (default)
- dummy: scripted transcripts for tests and dry runs
"""

from .base import BackendNotAvailableError, TranscriptionBackend
from .registry import get_available_backends, get_backend_class, get_backend_info

__all__ = [
    "BackendNotAvailableError",
    "TranscriptionBackend",
    "get_available_backends",
    "get_backend_class",
    "get_backend_info",
]
