"""
FFT spectrum computation.

Pipeline for a single waveform:
    1. Gate on configuration and waveform limits (failures become invalid
       results, never exceptions)
    2. Window (Hanning or rectangular)
    3. Zero-pad to the next power of two
    4. Real FFT -> magnitude |X|/N, rounded to 10 decimals
    5. Frequency-domain high/low-pass by zeroing bins
    6. Band aggregation on the full filtered spectrum
    7. Wall-clock budget check on the finished result
"""

from __future__ import annotations

import logging
import math
import time

import numpy as np
from numpy.typing import NDArray
from scipy import signal as sig

from .bands import aggregate_bands
from .config import AnalysisConfig, WindowType
from .constants import (
    MAX_CALCULATION_TIME_MS,
    MAX_SAMPLE_RATE,
    MAX_WAVEFORM_SAMPLES,
    PRECISION,
    SAMPLE_RATE_FACTOR,
    SAMPLE_RATE_TOO_HIGH,
    SAMPLE_RATE_TOO_LOW,
    TIME_BUDGET_EXCEEDED,
    WAVEFORM_EMPTY,
    WAVEFORM_TOO_LONG,
)
from .models import SpectrumResult, Waveform

logger = logging.getLogger(__name__)


def limit_precision(values: NDArray[np.floating]) -> NDArray[np.floating]:
    return np.round(values, PRECISION)


def apply_window(data: NDArray[np.floating], window_type: WindowType) -> NDArray[np.floating]:
    """Return a windowed copy of ``data``."""
    n = data.shape[0]
    if window_type == WindowType.RECTANGULAR or n == 0:
        return np.array(data, dtype=np.float64)
    # Symmetric Hann: 0.5 * (1 - cos(2*pi*i / (n - 1)))
    w = sig.get_window("hann", n, fftbins=False)
    return data * w


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def zero_pad(data: NDArray[np.floating]) -> NDArray[np.floating]:
    n = data.shape[0]
    n_padded = next_power_of_two(n)
    if n_padded == n:
        return data
    padded = np.zeros(n_padded, dtype=np.float64)
    padded[:n] = data
    return padded


def magnitude_spectrum(padded: NDArray[np.floating]) -> NDArray[np.floating]:
    """Magnitudes of the first N/2 bins, normalised by N."""
    n = padded.shape[0]
    fft_vals = np.fft.rfft(padded)[: n // 2]
    return limit_precision(np.abs(fft_vals) / n)


def frequency_filter(
    spectrum: NDArray[np.floating],
    resolution: float,
    config: AnalysisConfig,
) -> NDArray[np.floating]:
    """Zero the bins outside the pass region. Returns a new array."""
    filtered = spectrum.copy()

    min_idx = math.floor(config.min_frequency / resolution)
    filtered[:max(min_idx, 0)] = 0.0

    if config.high_pass_frequency > 0:
        hp_idx = math.floor(config.high_pass_frequency / resolution)
        filtered[:max(hp_idx, 0)] = 0.0

    cutoff = config.max_frequency
    if config.low_pass_frequency > 0:
        cutoff = min(config.max_frequency, config.low_pass_frequency)
    cutoff_idx = math.ceil(cutoff / resolution)
    filtered[cutoff_idx:] = 0.0

    return filtered


def _gate(waveform: Waveform, config: AnalysisConfig) -> str | None:
    # Checked first so an over-rate waveform is reported as such whatever the config
    if waveform.sample_rate > MAX_SAMPLE_RATE:
        return SAMPLE_RATE_TOO_HIGH
    reason = config.validate()
    if reason is not None:
        return reason
    if waveform.sample_rate < config.max_frequency * SAMPLE_RATE_FACTOR:
        return SAMPLE_RATE_TOO_LOW
    if waveform.n_samples > MAX_WAVEFORM_SAMPLES:
        return WAVEFORM_TOO_LONG
    if waveform.n_samples == 0:
        return WAVEFORM_EMPTY
    return None


def compute_spectrum(
    waveform: Waveform,
    config: AnalysisConfig,
    time_budget_ms: float = MAX_CALCULATION_TIME_MS,
) -> SpectrumResult:
    """
    Compute the banded magnitude spectrum of ``waveform``.

    Never raises for bad parameters or waveforms: the returned result has
    ``is_valid=False`` and an ``error_message`` instead.

    The time budget is checked after the work is done. A result that took
    longer than ``time_budget_ms`` is discarded and reported as invalid, so
    identical inputs may succeed or fail depending on machine load.

    Args:
        waveform: Time-domain samples
        config: Analysis parameters
        time_budget_ms: Maximum wall-clock time for the whole computation

    Returns:
        SpectrumResult
    """
    t0 = time.perf_counter()

    reason = _gate(waveform, config)
    if reason is not None:
        logger.warning(f"Spectrum rejected: {reason}")
        return SpectrumResult.invalid(reason, config.max_frequency, waveform.quantity)

    windowed = apply_window(waveform.data, config.window_type)
    padded = zero_pad(windowed)
    spectrum = magnitude_spectrum(padded)
    resolution = waveform.sample_rate / padded.shape[0]

    filtered = frequency_filter(spectrum, resolution, config)
    # Bands use the full filtered spectrum; the line limit only applies to
    # the exported view (SpectrumResult.line_spectrum).
    band_peaks = aggregate_bands(filtered, resolution, config)

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    if elapsed_ms > time_budget_ms:
        logger.warning(
            f"Spectrum discarded: {elapsed_ms:.1f} ms exceeds the {time_budget_ms:g} ms budget "
            f"({waveform.n_samples} samples, {waveform.duration_s:.2f} s)"
        )
        return SpectrumResult.invalid(
            TIME_BUDGET_EXCEEDED.format(budget=time_budget_ms),
            config.max_frequency,
            waveform.quantity,
            resolution=resolution,
        )

    logger.debug(
        f"Spectrum computed: {waveform.n_samples} samples -> {padded.shape[0]} points, "
        f"resolution {resolution:.4f} Hz, {len(band_peaks)} bands in {elapsed_ms:.1f} ms"
    )
    return SpectrumResult(
        max_frequency=config.max_frequency,
        resolution=resolution,
        quantity=waveform.quantity,
        band_peaks=band_peaks,
        is_valid=True,
        spectrum=filtered,
        number_of_lines=config.number_of_lines,
    )
