"""
Machine speed estimate from a banded spectrum.

This is a heuristic, not a harmonic search. The first band (in ascending
frequency) whose peak is at least twice the mean band peak is taken as the
running-speed band. Its center frequency is returned in RPM. Because the
first qualifying band wins, a strong higher harmonic never overrides a
qualifying lower band.
"""

from __future__ import annotations

from typing import Optional

from .models import SpectrumResult

PEAK_TO_MEAN_RATIO = 2.0


def estimate_speed(result: SpectrumResult) -> Optional[float]:
    """Estimated speed in RPM, or None if there is no estimate."""
    if not result.is_valid or not result.band_peaks:
        return None

    peaks = list(result.band_peaks.values())
    target = PEAK_TO_MEAN_RATIO * (sum(peaks) / len(peaks))

    for (start, end), value in result.band_peaks.items():
        if value >= target:
            return (start + end) / 2.0 * 60.0
    return None
