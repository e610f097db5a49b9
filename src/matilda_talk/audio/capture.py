#!/usr/bin/env python3
"""Live microphone capture using PyAudio.

The PyAudio callback thread is the only writer; the talk loop reads the most
recent audio with get() and discards finalized audio with clear().
"""
import logging
from typing import Any

import numpy as np
import pyaudio

from ..streaming.types import CaptureError
from .buffer import CaptureBuffer
from .conversion import pcm_bytes_to_float32

logger = logging.getLogger(__name__)


def list_input_devices() -> list[dict[str, Any]]:
    """Enumerate capture devices as {index, name, channels, default_sample_rate}."""
    pa = pyaudio.PyAudio()
    try:
        devices: list[dict[str, Any]] = []
        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if int(info.get("maxInputChannels", 0)) > 0:
                devices.append(
                    {
                        "index": i,
                        "name": info.get("name", f"device {i}"),
                        "channels": int(info["maxInputChannels"]),
                        "default_sample_rate": float(info.get("defaultSampleRate", 0.0)),
                    }
                )
        return devices
    finally:
        pa.terminate()


class AudioCapture:
    """Continuously records mono audio into a bounded CaptureBuffer."""

    def __init__(
        self,
        buffer_ms: int,
        sample_rate: int = 16000,
        device_index: int = -1,
        frames_per_buffer: int = 1024,
    ):
        self.sample_rate = sample_rate
        self.device_index = device_index
        self.frames_per_buffer = frames_per_buffer
        self.buffer = CaptureBuffer(max_seconds=buffer_ms / 1000.0, sample_rate=sample_rate)

        self._pyaudio: pyaudio.PyAudio | None = None
        self._stream: Any = None
        self.is_running = False

    def start(self) -> None:
        """Open the input stream and start recording.

        Raises:
            CaptureError: If the device cannot be opened

        """
        if self.is_running:
            return

        try:
            self._pyaudio = pyaudio.PyAudio()
            self._stream = self._pyaudio.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.sample_rate,
                input=True,
                input_device_index=None if self.device_index < 0 else self.device_index,
                frames_per_buffer=self.frames_per_buffer,
                stream_callback=self._audio_callback,
            )
            self._stream.start_stream()
        except Exception as e:
            self._terminate()
            raise CaptureError(f"Failed to open capture device {self.device_index}: {e}", cause=e) from e

        self.is_running = True
        logger.info(f"Audio capture started: device={self.device_index}, {self.sample_rate}Hz")

    def stop(self) -> None:
        """Stop recording and release the device."""
        if self._stream is not None:
            try:
                self._stream.stop_stream()
                self._stream.close()
            except Exception as e:
                logger.warning(f"Error closing capture stream: {e}")
            self._stream = None
        self._terminate()
        self.is_running = False
        logger.info("Audio capture stopped")

    def _terminate(self) -> None:
        if self._pyaudio is not None:
            self._pyaudio.terminate()
            self._pyaudio = None

    def _audio_callback(self, in_data, frame_count, time_info, status):
        if status:
            logger.warning(f"Audio callback status: {status}")
        self.buffer.append(pcm_bytes_to_float32(in_data))
        return (None, pyaudio.paContinue)

    def get(self, duration_ms: int) -> np.ndarray:
        """Most recent duration_ms of audio; shorter if less has been captured."""
        return self.buffer.latest(self.sample_rate * duration_ms // 1000)

    def clear(self) -> None:
        self.buffer.clear()
