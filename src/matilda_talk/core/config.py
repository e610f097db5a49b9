#!/usr/bin/env python3
"""Configuration loader that reads from config files."""
import os
from pathlib import Path
from typing import Any

import tomllib

DEFAULT_CONFIG: dict[str, Any] = {
    "transcription": {"backend": "faster_whisper"},
    "whisper": {
        "model": "base.en",
        "device": "auto",
        "compute_type": "auto",
        "threads": min(4, os.cpu_count() or 1),
        "max_tokens": 32,
        "audio_ctx": 0,
        "speed_up": False,
        "translate": False,
        "language": "en",
    },
    "audio": {
        "sample_rate": 16000,
        "channels": 1,
        "capture_id": -1,
        "buffer_ms": 60000,
        "frames_per_buffer": 1024,
    },
    "segmentation": {
        "voice_ms": 30000,
        "detect_ms": 2000,
        "poll_interval_ms": 10,
        "max_chars": 100,
        # Documented only; the detector does not consult it.
        "tighten_chars": 60,
    },
    "vad": {
        "lookback_ms": 1000,
        "final_threshold": 0.6,
        "partial_threshold": 0.8,
        "freq_cutoff": 100.0,
        "print_energy": False,
    },
    "transport": {
        "final_url": "http://localhost:8888/speech",
        "partial_url": "http://localhost:8888/partial",
        "timeout_s": 5.0,
        "enabled": True,
    },
    "output": {"format": "text"},
}


class ConfigLoader:
    """Load configuration from config files."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        if config_path is None:
            config_path = self._default_config_path()

        self.config_file = str(config_path)
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, "rb") as f:
                full_config = tomllib.load(f)
            talk_config = full_config.get("talk", {})
        else:
            talk_config = {}

        self._config = self._merge_dicts(DEFAULT_CONFIG, talk_config)

    def _default_config_path(self) -> Path:
        env_path = os.environ.get("MATILDA_TALK_CONFIG")
        if env_path:
            return Path(env_path)
        return Path.home() / ".matilda" / "config.toml"

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g., 'vad.final_threshold')"""
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def transcription_backend(self) -> str:
        """Backend name, with 'TALK_BACKEND' taking priority over the config file."""
        env_backend = os.environ.get("TALK_BACKEND")
        if env_backend:
            return env_backend
        return str(self.get("transcription.backend", "faster_whisper"))

    @property
    def whisper_model(self) -> str:
        env_model = os.environ.get("TALK_MODEL")
        if env_model:
            return env_model
        return str(self.get("whisper.model", "base.en"))

    @property
    def whisper_device(self) -> str:
        env_device = os.environ.get("TALK_DEVICE")
        if env_device:
            return env_device
        return str(self.get("whisper.device", "auto"))

    @property
    def whisper_compute_type(self) -> str:
        return str(self.get("whisper.compute_type", "auto"))

    def detect_cuda_support(self) -> tuple[bool, str]:
        """Detect if CUDA is available and supported by CTranslate2.

        Returns:
            (cuda_available, reason): Boolean indicating CUDA availability and reason string

        """
        try:
            import ctranslate2

            cuda_device_count = ctranslate2.get_cuda_device_count()
            if cuda_device_count > 0:
                return True, f"CUDA available with {cuda_device_count} device(s)"
            return False, "CUDA not available (no devices detected)"
        except ImportError:
            return False, "CTranslate2 not installed"
        except AttributeError:
            return False, "CTranslate2 version does not support CUDA detection"
        except Exception as e:
            return False, f"CUDA detection failed: {e!s}"

    @property
    def whisper_device_auto(self) -> str:
        """Resolve 'auto' to cuda or cpu."""
        configured_device = self.whisper_device
        if configured_device != "auto":
            return configured_device

        cuda_available, _reason = self.detect_cuda_support()
        return "cuda" if cuda_available else "cpu"

    @property
    def whisper_compute_type_auto(self) -> str:
        """Resolve 'auto' compute type based on device."""
        configured_compute_type = self.whisper_compute_type
        if configured_compute_type != "auto":
            return configured_compute_type
        return "float16" if self.whisper_device_auto == "cuda" else "int8"

    @property
    def audio_sample_rate(self) -> int:
        return int(self.get("audio.sample_rate", 16000))

    @property
    def audio_channels(self) -> int:
        return int(self.get("audio.channels", 1))

    @property
    def frames_per_buffer(self) -> int:
        return int(self.get("audio.frames_per_buffer", 1024))

    @property
    def transport_timeout_s(self) -> float:
        return float(self.get("transport.timeout_s", 5.0))


_config_loader: ConfigLoader | None = None


def get_config(config_path: str | Path | None = None) -> ConfigLoader:
    """Get the global config loader instance.

    The first call decides the file; later calls return the same loader.
    """
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader(config_path)
    return _config_loader


def reset_config() -> None:
    """Drop the cached loader (used by tests and by --config)."""
    global _config_loader
    _config_loader = None


# Re-export logging functions
from .logging import setup_logging, shutdown_logging  # noqa: E402, F401
