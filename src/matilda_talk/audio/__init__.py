#!/usr/bin/env python3
"""Audio APIs for Matilda Talk.

Capture pulls in PyAudio, so it is only imported on first use.
"""

from importlib import import_module
from typing import TYPE_CHECKING

from .buffer import CaptureBuffer
from .conversion import int16_to_float32, pcm_bytes_to_float32
from .vad import EnergyProfile, detect_voice_activity, high_pass_filter, measure_energy
from .window import AudioSource, AudioWindowManager, SampleWindow

if TYPE_CHECKING:
    from .capture import AudioCapture, list_input_devices

__all__ = [
    "AudioCapture",
    "AudioSource",
    "AudioWindowManager",
    "CaptureBuffer",
    "EnergyProfile",
    "SampleWindow",
    "detect_voice_activity",
    "high_pass_filter",
    "int16_to_float32",
    "list_input_devices",
    "measure_energy",
    "pcm_bytes_to_float32",
]

_LAZY_EXPORTS = {
    "AudioCapture": (".capture", "AudioCapture"),
    "list_input_devices": (".capture", "list_input_devices"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
