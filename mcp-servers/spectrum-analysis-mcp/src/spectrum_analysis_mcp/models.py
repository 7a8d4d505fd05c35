"""
Data model for spectrum analysis.

- ``Quantity``: physical measurement domain of a waveform or spectrum
- ``Waveform``: immutable time-domain samples with sample rate and quantity
- ``SpectrumResult``: banded spectrum produced by the computation pipeline
  or the integration stage, valid or carrying a failure reason
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

Band = tuple[float, float]
TrendSeries = dict[str, float]


class Quantity(str, Enum):
    ACCELERATION = "Acceleration"
    VELOCITY = "Velocity"
    DISPLACEMENT = "Displacement"

    @classmethod
    def parse(cls, value: "Quantity | str") -> "Quantity":
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(
            f"Unknown quantity '{value}'. Use one of: {[m.value for m in cls]}"
        )


@dataclass(frozen=True, eq=False)
class Waveform:
    """Time-domain samples. The array is copied and made read-only."""
    data: NDArray[np.floating]
    sample_rate: float
    quantity: Quantity = Quantity.ACCELERATION

    def __post_init__(self) -> None:
        data = np.array(self.data, dtype=np.float64).ravel()
        data.setflags(write=False)
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "sample_rate", float(self.sample_rate))
        object.__setattr__(self, "quantity", Quantity.parse(self.quantity))

    @property
    def n_samples(self) -> int:
        return self.data.shape[0]

    @property
    def duration_s(self) -> float:
        return self.n_samples / self.sample_rate if self.sample_rate > 0 else 0


def _format_hz(value: float) -> str:
    """Shortest round-trip decimal text, without a trailing '.'."""
    return np.format_float_positional(float(value), trim="-")


def _empty_spectrum() -> NDArray[np.floating]:
    return np.zeros(0, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class SpectrumResult:
    """
    Banded spectrum.

    ``band_peaks`` maps (start_hz, end_hz) to the peak magnitude in that band,
    in ascending start order. ``spectrum`` keeps the filtered full-resolution
    magnitudes for plotting; it is not part of the band contract and is empty
    for invalid results. Consumers must check ``is_valid`` before trusting
    any other field.
    """
    max_frequency: float
    resolution: float
    quantity: Quantity
    band_peaks: dict[Band, float] = field(default_factory=dict)
    is_valid: bool = True
    error_message: Optional[str] = None
    spectrum: NDArray[np.floating] = field(default_factory=_empty_spectrum, repr=False)
    number_of_lines: int = 0

    @classmethod
    def invalid(
        cls,
        reason: str,
        max_frequency: float,
        quantity: Quantity,
        resolution: float = 0.0,
    ) -> SpectrumResult:
        return cls(
            max_frequency=max_frequency,
            resolution=resolution,
            quantity=quantity,
            band_peaks={},
            is_valid=False,
            error_message=reason,
        )

    @property
    def line_spectrum(self) -> NDArray[np.floating]:
        """Spectrum limited to the configured number of lines."""
        if self.number_of_lines <= 0:
            return self.spectrum
        return self.spectrum[: self.number_of_lines]

    @property
    def frequencies(self) -> NDArray[np.floating]:
        return np.arange(self.spectrum.shape[0]) * self.resolution

    @property
    def max_peak(self) -> float:
        """Highest band peak, 0.0 when there are no bands."""
        return max(self.band_peaks.values(), default=0.0)

    def to_dict(self, include_spectrum: bool = False) -> dict:
        d = {
            "max_frequency": self.max_frequency,
            "resolution": self.resolution,
            "quantity": self.quantity.value,
            "band_peaks": {
                f"{_format_hz(start)},{_format_hz(end)}": value
                for (start, end), value in self.band_peaks.items()
            },
            "is_valid": self.is_valid,
            "error_message": self.error_message,
        }
        if include_spectrum:
            d["spectrum"] = self.line_spectrum.tolist()
        return d

    def summary(self) -> dict:
        """Compact summary (no arrays)."""
        return {
            "quantity": self.quantity.value,
            "is_valid": self.is_valid,
            "error_message": self.error_message,
            "resolution_hz": round(self.resolution, 6),
            "max_frequency_hz": self.max_frequency,
            "n_bands": len(self.band_peaks),
            "max_peak": self.max_peak,
        }
