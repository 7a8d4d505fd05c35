import numpy as np
import pytest

from spectrum_analysis_mcp.config import AnalysisConfig
from spectrum_analysis_mcp.models import Quantity, Waveform


@pytest.fixture
def make_sine():
    """Factory for sine waveforms: make_sine(frequency, sample_rate=10000, duration=1, ...)."""

    def _make(
        frequency: float = 50.0,
        sample_rate: float = 10000.0,
        duration: float = 1.0,
        amplitude: float = 1.0,
        quantity: Quantity = Quantity.ACCELERATION,
    ) -> Waveform:
        n = int(sample_rate * duration)
        t = np.arange(n) / sample_rate
        return Waveform(amplitude * np.sin(2 * np.pi * frequency * t), sample_rate, quantity)

    return _make


@pytest.fixture
def scenario_config() -> AnalysisConfig:
    """10-1000 Hz, 25 Hz bands, 10 Hz high-pass."""
    return (
        AnalysisConfig()
        .with_number_of_lines(1024)
        .with_min_frequency(10)
        .with_max_frequency(1000)
        .with_band_range(25)
        .with_high_pass_frequency(10)
    )
