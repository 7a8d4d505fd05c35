from spectrum_analysis_mcp.config import AnalysisConfig
from spectrum_analysis_mcp.fft_analysis import compute_spectrum
from spectrum_analysis_mcp.models import Quantity, SpectrumResult
from spectrum_analysis_mcp.speed import estimate_speed


def _result(values: list[float], is_valid: bool = True) -> SpectrumResult:
    bands = {(10.0 * i, 10.0 * (i + 1)): v for i, v in enumerate(values)}
    return SpectrumResult(
        max_frequency=10.0 * len(values),
        resolution=1.0,
        quantity=Quantity.ACCELERATION,
        band_peaks=bands,
        is_valid=is_valid,
    )


def test_first_band_above_twice_mean_wins() -> None:
    # mean 3.125 -> target 6.25; (10, 20) qualifies before the larger (30, 40)
    rpm = estimate_speed(_result([1, 9, 1, 10, 1, 1, 1, 1]))
    assert rpm == 15.0 * 60


def test_no_band_reaches_target() -> None:
    assert estimate_speed(_result([1, 10, 1, 10])) is None


def test_no_bands() -> None:
    assert estimate_speed(_result([])) is None


def test_invalid_result() -> None:
    assert estimate_speed(_result([1, 9, 1, 1], is_valid=False)) is None


def test_estimate_from_fifty_hertz_tone(make_sine) -> None:
    config = AnalysisConfig(max_frequency=1000, band_range=25, high_pass_frequency=10)
    rpm = estimate_speed(compute_spectrum(make_sine(50.0), config))
    assert rpm is not None
    assert 25 * 60 <= rpm <= 75 * 60
