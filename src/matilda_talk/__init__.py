"""Matilda Talk - streaming speech segmentation and transcript assembly."""

from importlib import import_module, metadata
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING


def _get_version() -> str:
    try:
        return metadata.version("goobits-matilda-talk")
    except Exception:
        pass

    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return str(data["project"]["version"])
    except Exception:
        return "unknown"


__version__ = _get_version()

if TYPE_CHECKING:
    from .core.config import ConfigLoader, get_config
    from .core.params import TalkParams
    from .modes.talk import TalkMode
    from .streaming.processor import SegmentProcessor
    from .streaming.sentences import split_sentences
    from .transcription.backends import get_available_backends, get_backend_class

__all__ = [
    "ConfigLoader",
    "SegmentProcessor",
    "TalkMode",
    "TalkParams",
    "__version__",
    "get_available_backends",
    "get_backend_class",
    "get_config",
    "split_sentences",
]

_LAZY_EXPORTS = {
    "ConfigLoader": (".core.config", "ConfigLoader"),
    "get_config": (".core.config", "get_config"),
    "TalkParams": (".core.params", "TalkParams"),
    "TalkMode": (".modes.talk", "TalkMode"),
    "SegmentProcessor": (".streaming.processor", "SegmentProcessor"),
    "split_sentences": (".streaming.sentences", "split_sentences"),
    "get_available_backends": (".transcription.backends", "get_available_backends"),
    "get_backend_class": (".transcription.backends", "get_backend_class"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
