"""Unit tests for backend selection and the dummy backend."""

import asyncio
import sys
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from matilda_talk.audio.window import SampleWindow
from matilda_talk.transcription.backends import (
    BackendNotAvailableError,
    TranscriptionBackend,
    get_available_backends,
    get_backend_class,
    get_backend_info,
)
from matilda_talk.transcription.backends import registry
from matilda_talk.transcription.backends.internal.dummy import DummyBackend


@pytest.fixture
def reset_availability():
    registry.FASTER_WHISPER_AVAILABLE = None
    yield
    registry.FASTER_WHISPER_AVAILABLE = None


class TestRegistry:
    def test_dummy_backend(self):
        assert get_backend_class("dummy") is DummyBackend

    def test_faster_whisper_backend(self, reset_availability):
        with patch.dict(sys.modules, {"faster_whisper": MagicMock()}):
            backend_class = get_backend_class("faster_whisper")

        assert issubclass(backend_class, TranscriptionBackend)
        assert backend_class.__name__ == "FasterWhisperBackend"

    def test_faster_whisper_not_installed(self, reset_availability):
        registry.FASTER_WHISPER_AVAILABLE = False

        with pytest.raises(BackendNotAvailableError, match="pip install faster-whisper"):
            get_backend_class("faster_whisper")

        assert get_available_backends() == ["dummy"]
        assert get_backend_info()["faster_whisper"]["available"] is False

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend: 'parakeet'"):
            get_backend_class("parakeet")


class TestDummyBackend:
    def test_scripted_texts_in_order(self):
        backend = DummyBackend(texts=["one", "two"])

        texts = [backend.transcribe(np.zeros(n, dtype=np.float32)).text for n in (10, 20, 30)]

        assert texts == ["one", "two", "two"]
        assert backend.calls == [10, 20, 30]

    def test_confidence(self):
        backend = DummyBackend(texts=["hello", ""], confidence=0.5)

        assert backend.transcribe(np.zeros(1, dtype=np.float32)).confidence == 0.5
        assert backend.transcribe(np.zeros(1, dtype=np.float32)).confidence == 0.0

    def test_load(self):
        backend = DummyBackend()
        assert not backend.is_ready

        asyncio.run(backend.load())

        assert backend.is_ready

    def test_empty_window_skips_engine(self):
        backend = DummyBackend()

        result = backend.transcribe_window(SampleWindow.empty())

        assert result.text == ""
        assert backend.calls == []
