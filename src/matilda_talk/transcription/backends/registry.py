"""Backend registry and availability checks.

Backend selection lives here so the talk loop never import-probes engines itself.
"""

from __future__ import annotations

import logging

from .base import BackendNotAvailableError, TranscriptionBackend

logger = logging.getLogger(__name__)

FASTER_WHISPER_AVAILABLE: bool | None = None


def _check_faster_whisper_available() -> bool:
    """Return whether faster-whisper can be imported."""
    global FASTER_WHISPER_AVAILABLE
    if FASTER_WHISPER_AVAILABLE is not None:
        return FASTER_WHISPER_AVAILABLE
    try:
        import faster_whisper as _faster_whisper  # noqa: F401

        FASTER_WHISPER_AVAILABLE = True
    except Exception as exc:
        logger.debug("faster-whisper unavailable: %s", exc)
        FASTER_WHISPER_AVAILABLE = False
    return FASTER_WHISPER_AVAILABLE


def get_available_backends() -> list[str]:
    """Return list of available backend names."""
    backends = ["dummy"]
    if _check_faster_whisper_available():
        backends.append("faster_whisper")
    return backends


def get_backend_info() -> dict[str, dict]:
    """Return detailed info about all backends."""
    return {
        "dummy": {
            "available": True,
            "description": "Scripted test backend (no model downloads)",
            "models": "N/A",
            "install": "Included by default",
        },
        "faster_whisper": {
            "available": _check_faster_whisper_available(),
            "description": "Whisper via CTranslate2 with CUDA/CPU support",
            "models": "Whisper tiny/base/small/medium/large-v3 and .en variants",
            "install": "pip install faster-whisper",
        },
    }


def get_backend_class(backend_name: str) -> type[TranscriptionBackend]:
    """Factory function to get the backend class based on name."""
    if backend_name == "dummy":
        from .internal.dummy import DummyBackend

        return DummyBackend

    if backend_name == "faster_whisper":
        if not _check_faster_whisper_available():
            raise BackendNotAvailableError(
                "faster_whisper backend requested but faster-whisper is not installed.\n"
                "Install it with: pip install faster-whisper"
            )
        from .internal.faster_whisper import FasterWhisperBackend

        return FasterWhisperBackend

    available = get_available_backends()
    raise ValueError(
        f"Unknown backend: '{backend_name}'\n"
        f"Available backends: {', '.join(available)}\n"
        f"  - 'faster_whisper' (default): Whisper with CUDA/CPU support\n"
        f"  - 'dummy': Scripted test backend (no model)\n"
        f'Check your matilda config: [talk.transcription] backend = "faster_whisper"'
    )
