"""Energy-based voice activity classifier.

Compares the mean absolute energy of the most recent look-back tail with the
energy of the whole window. A quiet tail after louder audio means the speaker
paused, which is the signal the talk loop acts on.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy import signal as scipy_signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnergyProfile:
    """Mean absolute energy of a window and of its look-back tail."""

    energy_all: float
    energy_last: float

    def is_quiet(self, threshold: float) -> bool:
        # Digital silence has nothing to compare against
        if self.energy_all <= 0.0:
            return False
        return self.energy_last <= threshold * self.energy_all


def high_pass_filter(samples: np.ndarray, cutoff: float, sample_rate: int) -> np.ndarray:
    """First-order high-pass filter; returns a new array.

    y[0] = x[0], y[i] = alpha * (y[i-1] + x[i] - x[i-1])
    """
    if len(samples) == 0:
        return samples.astype(np.float32)

    rc = 1.0 / (2.0 * math.pi * cutoff)
    dt = 1.0 / sample_rate
    alpha = dt / (rc + dt)

    data = samples.astype(np.float64)
    # Initial state makes the first output equal the first input
    zi = np.array([(1.0 - alpha) * data[0]])
    filtered, _ = scipy_signal.lfilter([alpha, -alpha], [1.0, -alpha], data, zi=zi)
    return filtered.astype(np.float32)


def measure_energy(
    samples: np.ndarray,
    sample_rate: int,
    lookback_ms: int,
    freq_cutoff: float,
) -> EnergyProfile | None:
    """Filter the window once and measure it.

    Returns None when the window is no longer than the look-back tail, since
    there is no reference energy to compare against.
    """
    n_samples_last = sample_rate * lookback_ms // 1000
    if n_samples_last <= 0 or n_samples_last >= len(samples):
        return None

    if freq_cutoff > 0.0:
        samples = high_pass_filter(samples, freq_cutoff, sample_rate)

    magnitude = np.abs(samples)
    return EnergyProfile(
        energy_all=float(magnitude.mean()),
        energy_last=float(magnitude[-n_samples_last:].mean()),
    )


def detect_voice_activity(
    samples: np.ndarray,
    sample_rate: int,
    lookback_ms: int,
    threshold: float,
    freq_cutoff: float,
    verbose: bool = False,
) -> bool:
    """Return True when the look-back tail is quiet relative to the window."""
    profile = measure_energy(samples, sample_rate, lookback_ms, freq_cutoff)
    if profile is None:
        return False

    if verbose:
        logger.debug(
            f"energy_all: {profile.energy_all:.6f}, energy_last: {profile.energy_last:.6f}, "
            f"vad_thold: {threshold:.3f}, freq_thold: {freq_cutoff:.1f}"
        )

    return profile.is_quiet(threshold)
