import math

import numpy as np
import pytest

from spectrum_analysis_mcp.config import AnalysisConfig
from spectrum_analysis_mcp.constants import DOUBLE_INTEGRATION
from spectrum_analysis_mcp.fft_analysis import compute_spectrum
from spectrum_analysis_mcp.integration import INTEGRATION_TRANSITIONS, integrate
from spectrum_analysis_mcp.models import Quantity, SpectrumResult

HIGH_PASS = AnalysisConfig().with_high_pass_frequency(10)


def _banded(quantity: Quantity = Quantity.ACCELERATION, is_valid: bool = True) -> SpectrumResult:
    return SpectrumResult(
        max_frequency=50.0,
        resolution=1.0,
        quantity=quantity,
        band_peaks={(0.0, 0.0): 5.0, (0.0, 25.0): 1.0, (25.0, 50.0): 2.0},
        is_valid=is_valid,
        spectrum=np.ones(8),
    )


def test_displacement_is_terminal() -> None:
    assert INTEGRATION_TRANSITIONS[Quantity.ACCELERATION] is Quantity.VELOCITY
    assert INTEGRATION_TRANSITIONS[Quantity.VELOCITY] is Quantity.DISPLACEMENT
    assert Quantity.DISPLACEMENT not in INTEGRATION_TRANSITIONS


def test_band_values_divided_by_angular_center_frequency() -> None:
    out = integrate(_banded(), HIGH_PASS)
    assert out.is_valid
    assert out.quantity is Quantity.VELOCITY
    assert out.band_peaks[(0.0, 25.0)] == pytest.approx(1.0 / (2 * math.pi * 12.5))
    assert out.band_peaks[(25.0, 50.0)] == pytest.approx(2.0 / (2 * math.pi * 37.5))


def test_zero_center_bands_are_dropped() -> None:
    out = integrate(_banded(), HIGH_PASS)
    assert (0.0, 0.0) not in out.band_peaks
    assert list(out.band_peaks) == [(0.0, 25.0), (25.0, 50.0)]


def test_input_is_not_mutated() -> None:
    source = _banded()
    integrate(source, HIGH_PASS)
    assert source.quantity is Quantity.ACCELERATION
    assert source.band_peaks == {(0.0, 0.0): 5.0, (0.0, 25.0): 1.0, (25.0, 50.0): 2.0}
    np.testing.assert_array_equal(source.spectrum, np.ones(8))


def test_retained_spectrum_is_integrated_per_bin() -> None:
    out = integrate(_banded(), HIGH_PASS)
    assert out.spectrum[0] == 0
    assert out.spectrum[2] == pytest.approx(1.0 / (2 * math.pi * 2.0))


def test_acceleration_to_displacement_then_rejected() -> None:
    velocity = integrate(_banded(), HIGH_PASS)
    displacement = integrate(velocity, HIGH_PASS)
    assert displacement.is_valid
    assert displacement.quantity is Quantity.DISPLACEMENT

    third = integrate(displacement, HIGH_PASS)
    assert not third.is_valid
    assert "cannot integrate displacement" in third.error_message.lower()
    assert third.error_message == DOUBLE_INTEGRATION
    assert third.quantity is Quantity.DISPLACEMENT
    assert third.band_peaks == displacement.band_peaks


@pytest.mark.parametrize("is_valid", [True, False])
def test_no_high_pass_means_no_integration(is_valid: bool) -> None:
    source = _banded(is_valid=is_valid)
    out = integrate(source, AnalysisConfig())
    assert not out.is_valid
    message = out.error_message.lower()
    assert "not allowed" in message
    assert "high pass" in message
    assert out.band_peaks == source.band_peaks
    assert out.quantity is Quantity.ACCELERATION


def test_eligibility_is_checked_before_quantity() -> None:
    out = integrate(_banded(Quantity.DISPLACEMENT), AnalysisConfig())
    assert "not allowed" in out.error_message


def test_fifty_hertz_scenario(make_sine, scenario_config: AnalysisConfig) -> None:
    spectrum = compute_spectrum(make_sine(50.0), scenario_config)
    band, peak = max(spectrum.band_peaks.items(), key=lambda kv: kv[1])
    velocity = integrate(spectrum, scenario_config)
    center = (band[0] + band[1]) / 2
    assert velocity.band_peaks[band] == pytest.approx(peak / (2 * math.pi * center), rel=0.1)


@pytest.mark.parametrize(
    "source, config",
    [
        (_banded(), AnalysisConfig()),
        (_banded(Quantity.DISPLACEMENT), HIGH_PASS),
    ],
)
def test_rejected_result_shares_no_state_with_input(source: SpectrumResult, config: AnalysisConfig) -> None:
    out = integrate(source, config)
    assert not out.is_valid
    assert out.band_peaks is not source.band_peaks
    assert not np.shares_memory(out.spectrum, source.spectrum)

    out.band_peaks[(25.0, 50.0)] = 99.0
    out.spectrum[0] = 99.0
    assert source.band_peaks[(25.0, 50.0)] == 2.0
    assert source.spectrum[0] == 1.0
