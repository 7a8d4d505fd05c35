"""
Band aggregation.

The frequency axis from ``min_frequency`` to ``max_frequency`` is cut into
contiguous bands of ``band_range`` Hz (the last one may be narrower) and the
peak magnitude of each band is kept.
"""

from __future__ import annotations

import math
from typing import Iterator, Optional

import numpy as np
from numpy.typing import NDArray

from .config import AnalysisConfig
from .constants import PRECISION
from .models import Band, SpectrumResult


def band_edges(min_frequency: float, max_frequency: float, band_range: float) -> Iterator[Band]:
    """
    Yield (start, end) pairs in ascending order.

    Edges are min_frequency + k * band_range rounded to PRECISION decimals.
    """
    k = 0
    start = min_frequency
    while start < max_frequency:
        end = round(min_frequency + (k + 1) * band_range, PRECISION)
        yield start, min(end, max_frequency)
        k += 1
        start = end


def peak_in_range(
    spectrum: NDArray[np.floating],
    start_freq: float,
    end_freq: float,
    resolution: float,
) -> float:
    """Largest magnitude over bins [floor(start/res), ceil(end/res)), 0 if empty."""
    start_idx = max(0, math.floor(start_freq / resolution))
    end_idx = min(math.ceil(end_freq / resolution), spectrum.shape[0])
    if end_idx <= start_idx:
        return 0.0
    peak = max(float(np.max(spectrum[start_idx:end_idx])), 0.0)
    return round(peak, PRECISION)


def aggregate_bands(
    spectrum: NDArray[np.floating],
    resolution: float,
    config: AnalysisConfig,
) -> dict[Band, float]:
    return {
        band: peak_in_range(spectrum, band[0], band[1], resolution)
        for band in band_edges(config.min_frequency, config.max_frequency, config.band_range)
    }


def peak_in_band(result: SpectrumResult, start_freq: float, end_freq: float) -> Optional[float]:
    """
    Stored peak for an exact (start, end) band key.

    Returns None ("not computed") for invalid results and for bands that are
    not on the configured grid; no recomputation is attempted.
    """
    if not result.is_valid:
        return None
    return result.band_peaks.get((start_freq, end_freq))
