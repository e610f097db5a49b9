"""Endpoint detection with an adaptive pause threshold.

Each tick measures the look-back window once and compares it against the strict
final threshold (end of utterance) and the adaptive threshold (pause). The
adaptive threshold starts at the final threshold and moves halfway toward the
looser partial threshold after every partial decision, so a long utterance is
cut into segments more and more readily. A final decision resets it.
"""

import logging
from collections.abc import Callable

import numpy as np

from ..audio.vad import EnergyProfile, measure_energy
from ..audio.window import SampleWindow
from .types import Detection

logger = logging.getLogger(__name__)

# meter(samples, lookback_ms, freq_cutoff) -> EnergyProfile | None
MeterFn = Callable[[np.ndarray, int, float], EnergyProfile | None]


def energy_meter(sample_rate: int = 16000) -> MeterFn:
    """Bind the energy measurement to a sample rate."""

    def meter(samples: np.ndarray, lookback_ms: int, freq_cutoff: float) -> EnergyProfile | None:
        return measure_energy(samples, sample_rate, lookback_ms, freq_cutoff)

    return meter


class EndpointDetector:
    """Two-threshold voice activity check over a short look-back window."""

    def __init__(
        self,
        final_threshold: float,
        partial_threshold: float,
        lookback_ms: int = 1000,
        freq_cutoff: float = 100.0,
        meter: MeterFn | None = None,
        verbose: bool = False,
    ):
        if partial_threshold < final_threshold:
            raise ValueError("partial_threshold must not be stricter than final_threshold")

        self.final_threshold = final_threshold
        self.partial_threshold = partial_threshold
        self.lookback_ms = lookback_ms
        self.freq_cutoff = freq_cutoff
        self.meter = meter or energy_meter()
        self.verbose = verbose

    def detect(self, window: SampleWindow, adaptive_threshold: float) -> Detection:
        """Measure the window once and judge it at the final and the adaptive threshold."""
        if window.is_empty:
            return Detection()

        profile = self.meter(window.samples, self.lookback_ms, self.freq_cutoff)
        if profile is None:
            return Detection()

        if self.verbose:
            logger.debug(
                f"energy_all: {profile.energy_all:.6f}, energy_last: {profile.energy_last:.6f}, "
                f"vad_thold: {self.final_threshold:.3f}, adaptive: {adaptive_threshold:.3f}, "
                f"freq_thold: {self.freq_cutoff:.1f}"
            )

        return Detection(
            detected_end=profile.is_quiet(self.final_threshold),
            detected_pause=profile.is_quiet(adaptive_threshold),
        )

    def loosen(self, adaptive_threshold: float) -> float:
        """Move halfway toward the partial threshold."""
        loosened = adaptive_threshold + (self.partial_threshold - adaptive_threshold) / 2
        # Stay within [final, partial] under float rounding
        return min(max(loosened, self.final_threshold), self.partial_threshold)

    def reset(self) -> float:
        return self.final_threshold
