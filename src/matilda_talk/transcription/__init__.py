"""Speech-to-text engines used by the talk loop."""

from .backends import TranscriptionBackend, get_backend_class

__all__ = ["TranscriptionBackend", "get_backend_class"]
