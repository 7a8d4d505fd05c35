"""
Frequency-domain integration between physical quantities.

Acceleration -> Velocity -> Displacement. Each step divides a band's value
by 2*pi*f_center. Displacement has no entry in the transition table, so it
cannot be integrated again.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np

from .config import AnalysisConfig
from .constants import DOUBLE_INTEGRATION, INTEGRATION_NOT_ALLOWED, PRECISION
from .models import Quantity, SpectrumResult

logger = logging.getLogger(__name__)

INTEGRATION_TRANSITIONS: dict[Quantity, Quantity] = {
    Quantity.ACCELERATION: Quantity.VELOCITY,
    Quantity.VELOCITY: Quantity.DISPLACEMENT,
}


def _integrate_spectrum(spectrum: np.ndarray, resolution: float) -> np.ndarray:
    out = np.zeros_like(spectrum)
    if spectrum.shape[0] > 1 and resolution > 0:
        freqs = np.arange(1, spectrum.shape[0]) * resolution
        out[1:] = spectrum[1:] / (2.0 * np.pi * freqs)
    return np.round(out, PRECISION)


def _rejected(result: SpectrumResult, reason: str) -> SpectrumResult:
    return replace(
        result,
        band_peaks=dict(result.band_peaks),
        is_valid=False,
        error_message=reason,
        spectrum=result.spectrum.copy(),
    )


def integrate(result: SpectrumResult, config: AnalysisConfig) -> SpectrumResult:
    """
    Integrate a banded spectrum one step (e.g. acceleration to velocity).

    Eligibility is checked against ``config`` as it is now, not as it was
    when the spectrum was computed. The input result is never modified.

    Bands whose center frequency is <= 0 are dropped from the output.
    """
    if not config.integration_allowed:
        logger.warning(f"Integration rejected: {INTEGRATION_NOT_ALLOWED}")
        return _rejected(result, INTEGRATION_NOT_ALLOWED)

    next_quantity = INTEGRATION_TRANSITIONS.get(result.quantity)
    if next_quantity is None:
        logger.warning(f"Integration rejected: {DOUBLE_INTEGRATION}")
        return _rejected(result, DOUBLE_INTEGRATION)

    band_peaks = {}
    for (start, end), value in result.band_peaks.items():
        center = (start + end) / 2.0
        if center <= 0:
            continue
        band_peaks[(start, end)] = round(value / (2.0 * math.pi * center), PRECISION)

    return replace(
        result,
        quantity=next_quantity,
        band_peaks=band_peaks,
        is_valid=True,
        error_message=None,
        spectrum=_integrate_spectrum(result.spectrum, result.resolution),
    )
