"""Shared fixtures for Matilda Talk tests.

Every test runs against default configuration (no user config file) and logs
into a temporary directory.
"""

import numpy as np
import pytest

from matilda_talk.core.config import reset_config


class FakeSource:
    """In-memory capture stream with the get()/clear() contract of AudioCapture."""

    def __init__(self, sample_rate: int = 16000):
        self.sample_rate = sample_rate
        self.samples = np.array([], dtype=np.float32)
        self.clears = 0

    def feed(self, samples) -> None:
        self.samples = np.concatenate([self.samples, np.asarray(samples, dtype=np.float32)])

    def get(self, duration_ms: int) -> np.ndarray:
        n_samples = self.sample_rate * duration_ms // 1000
        if n_samples <= 0:
            return np.array([], dtype=np.float32)
        return self.samples[-n_samples:].copy()

    def clear(self) -> None:
        self.samples = np.array([], dtype=np.float32)
        self.clears += 1


class RecordingTransport:
    """Transport that records (channel, text) events."""

    def __init__(self, ok: bool = True):
        self.ok = ok
        self.events = []
        self.closed = False
        self.on_post = None

    async def post(self, text, channel) -> bool:
        self.events.append((channel, text))
        if self.on_post is not None:
            self.on_post(text, channel)
        return self.ok

    async def close(self) -> None:
        self.closed = True


def speech_then_silence(speech_ms: int = 1000, silence_ms: int = 1000, sample_rate: int = 16000) -> np.ndarray:
    """A 440 Hz tone followed by digital silence."""
    t = np.arange(sample_rate * speech_ms // 1000) / sample_rate
    tone = 0.5 * np.sin(2 * np.pi * 440 * t)
    silence = np.zeros(sample_rate * silence_ms // 1000)
    return np.concatenate([tone, silence]).astype(np.float32)


def steady_tone(duration_ms: int = 2000, sample_rate: int = 16000) -> np.ndarray:
    t = np.arange(sample_rate * duration_ms // 1000) / sample_rate
    return (0.5 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point config and logs at temporary paths and clear env overrides."""
    monkeypatch.setenv("MATILDA_TALK_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.setenv("MATILDA_TALK_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("MATILDA_LOG_DIR", raising=False)
    monkeypatch.delenv("MATILDA_TALK_CONSOLE_LOGS", raising=False)
    for var in ("TALK_MODEL", "TALK_DEVICE", "TALK_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def recording_transport():
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    return RecordingTransport(ok=False)


@pytest.fixture
def speech_audio():
    """One second of tone followed by one second of silence."""
    return speech_then_silence()


@pytest.fixture
def tone_audio():
    """Two seconds of steady tone."""
    return steady_tone()
