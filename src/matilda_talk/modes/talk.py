#!/usr/bin/env python3
"""
Talk Mode - Continuous listening with partial and final transcripts

The loop polls the capture stream every few milliseconds, asks the endpoint
detector whether the last second contained speech followed by a pause, and
hands every detection to the segment processor. Partial transcripts go out
while the speaker is still talking; sentences go out once an utterance ends.
"""

import asyncio
import signal
import threading
import time

from ..audio.window import AudioSource, AudioWindowManager
from ..core.config import get_config, setup_logging
from ..core.params import TalkParams
from ..streaming.dispatcher import OutputDispatcher
from ..streaming.endpoint import EndpointDetector, energy_meter
from ..streaming.processor import SegmentProcessor
from ..streaming.types import Detection, SegmentReport, SegmentState, TalkStats
from ..transcription.backends import TranscriptionBackend, get_backend_class
from ..transport import ConsoleTransport, FanoutTransport, Transport


class TalkMode:
    """Endpoint-driven streaming transcription."""

    def __init__(
        self,
        params: TalkParams,
        source: AudioSource | None = None,
        backend: TranscriptionBackend | None = None,
        transport: Transport | None = None,
    ):
        self.params = params
        self.config = get_config()
        self.logger = setup_logging(
            "matilda_talk",
            log_level="DEBUG" if params.debug else "INFO",
            include_console=params.debug,
            include_file=True,
        )

        self.source = source
        self.backend = backend
        self.transport = transport

        self.detector = EndpointDetector(
            final_threshold=params.final_threshold,
            partial_threshold=params.partial_threshold,
            lookback_ms=params.lookback_ms,
            freq_cutoff=params.freq_cutoff,
            meter=energy_meter(params.sample_rate),
            verbose=params.print_energy,
        )
        self.state = SegmentState.initial(params.final_threshold)
        self.stats = TalkStats()

        self.windows: AudioWindowManager | None = None
        self.dispatcher: OutputDispatcher | None = None
        self.processor: SegmentProcessor | None = None

        self.stop_event = threading.Event()
        self._owns_source = source is None
        self._started = 0.0

        self.logger.info(
            f"Talk config: model={params.model}, language={params.language}, "
            f"voice={params.voice_ms}ms, detect={params.detect_ms}ms, lookback={params.lookback_ms}ms, "
            f"thresholds={params.final_threshold}/{params.partial_threshold}, max_chars={params.max_chars}"
        )

    def stop(self) -> None:
        """Request a cooperative shutdown after the current tick."""
        self.stop_event.set()

    async def run(self):
        """Main talk loop.

        Startup failures (backend, capture device) propagate to the caller.
        """
        try:
            await self._load_model()
            self._start_capture()
            self._build_pipeline()
            self._install_signal_handlers()

            self._started = time.perf_counter()
            self.logger.info("Listening")
            await self._talk_loop()
        finally:
            await self._cleanup()

    async def _load_model(self):
        if self.backend is None:
            self.logger.info(f"Initializing backend: {self.params.backend}")
            BackendClass = get_backend_class(self.params.backend)
            self.backend = BackendClass(self.params)

        load_start = time.perf_counter()
        try:
            await self.backend.load()
        except Exception as e:
            self.logger.error(f"Failed to load transcription backend: {e}")
            raise
        self.logger.info(f"Backend {self.params.backend} loaded in {(time.perf_counter() - load_start) * 1000:.0f}ms")

    def _start_capture(self):
        if self.source is None:
            from ..audio.capture import AudioCapture

            self.source = AudioCapture(
                buffer_ms=self.params.audio_ms,
                sample_rate=self.params.sample_rate,
                device_index=self.params.capture_id,
                frames_per_buffer=self.config.frames_per_buffer,
            )
        if self._owns_source:
            self.source.start()

    def _build_pipeline(self):
        if self.transport is None:
            transports: list[Transport] = [ConsoleTransport(self.params.output_format)]
            if self.params.post_enabled:
                from ..transport.http import HttpTransport

                transports.append(
                    HttpTransport(self.params.final_url, self.params.partial_url, self.config.transport_timeout_s)
                )
            self.transport = FanoutTransport(transports)

        self.windows = AudioWindowManager(self.source, self.params.sample_rate, self.params.max_voice_samples)
        self.dispatcher = OutputDispatcher(self.transport)
        self.processor = SegmentProcessor(self.windows, self.backend, self.dispatcher, self.detector, self.params)

    def _install_signal_handlers(self):
        loop = asyncio.get_event_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError, ValueError):
                self.logger.debug(f"Cannot install handler for {sig.name}")

    async def _talk_loop(self):
        interval = self.params.poll_interval_ms / 1000.0
        while not self.stop_event.is_set():
            await asyncio.sleep(interval)
            # A stop during the sleep must not start another engine call
            if self.stop_event.is_set():
                break
            await self.tick()

    async def tick(self) -> SegmentReport | None:
        """Run one detection pass and process the segment if activity was found."""
        self.stats.ticks += 1
        window = self.windows.get_window(self.params.detect_ms)
        detection: Detection = self.detector.detect(window, self.state.adaptive_threshold)
        if not detection.triggered:
            return None

        self.stats.detections += 1
        report = await self.processor.process(self.state, detection)
        self.stats.record(report)
        return report

    async def _cleanup(self):
        """Release capture and transport resources and log session stats."""
        self.stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                asyncio.get_event_loop().remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                pass

        if self._owns_source and self.source is not None and hasattr(self.source, "stop"):
            self.source.stop()

        if self.dispatcher is not None:
            self.stats.failed_posts = self.dispatcher.failed_posts
            await self.dispatcher.close()
        elif self.transport is not None:
            await self.transport.close()

        if self._started:
            elapsed = time.perf_counter() - self._started
            self.logger.info(f"Session ended after {elapsed:.1f}s: {self.stats.to_dict()}")
