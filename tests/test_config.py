import pytest

from spectrum_analysis_mcp.config import (
    ANALYSIS_PRESETS,
    AnalysisConfig,
    ConfigError,
    WindowType,
    get_preset,
    list_presets,
)
from spectrum_analysis_mcp.constants import INVALID_FILTER, INVALID_PARAMETERS


def test_defaults_are_jointly_valid() -> None:
    config = AnalysisConfig()
    assert config.number_of_lines == 1024
    assert config.window_type is WindowType.HANNING
    assert config.max_frequency == 1000.0
    assert config.band_range == 25.0
    assert config.validate() is None
    assert not config.integration_allowed


@pytest.mark.parametrize("lines", [100, 1024, 102400])
def test_number_of_lines_accepts_bounds(lines: int) -> None:
    assert AnalysisConfig().with_number_of_lines(lines).number_of_lines == lines


@pytest.mark.parametrize("lines", [99, 0, 102401])
def test_number_of_lines_rejects_out_of_range(lines: int) -> None:
    with pytest.raises(ConfigError):
        AnalysisConfig().with_number_of_lines(lines)


@pytest.mark.parametrize(
    "setter",
    [
        "with_min_frequency",
        "with_max_frequency",
        "with_high_pass_frequency",
        "with_low_pass_frequency",
    ],
)
def test_negative_frequency_rejected(setter: str) -> None:
    config = AnalysisConfig()
    with pytest.raises(ConfigError, match="negative"):
        getattr(config, setter)(-1)
    assert config == AnalysisConfig()


def test_band_range_rules() -> None:
    config = AnalysisConfig().with_max_frequency(500)
    with pytest.raises(ConfigError, match="positive"):
        config.with_band_range(0)
    with pytest.raises(ConfigError, match="larger than max frequency"):
        config.with_band_range(501)
    assert config.with_band_range(500).band_range == 500


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)


def test_validate_reports_inverted_range() -> None:
    config = AnalysisConfig().with_min_frequency(2000)
    assert config.validate() == INVALID_PARAMETERS


def test_validate_reports_band_wider_than_lowered_max() -> None:
    # each setter is valid on its own, the combination is not
    config = AnalysisConfig().with_band_range(500).with_max_frequency(100)
    assert config.validate() == INVALID_PARAMETERS


def test_validate_reports_filter_ordering() -> None:
    config = AnalysisConfig().with_high_pass_frequency(500).with_low_pass_frequency(100)
    assert not config.filter_valid
    assert config.validate() == INVALID_FILTER


def test_disabled_cutoff_never_conflicts() -> None:
    assert AnalysisConfig().with_high_pass_frequency(500).filter_valid
    assert AnalysisConfig().with_low_pass_frequency(5).filter_valid


def test_integration_allowed_follows_high_pass() -> None:
    assert AnalysisConfig().with_high_pass_frequency(0.5).integration_allowed
    assert not AnalysisConfig().with_low_pass_frequency(500).integration_allowed


def test_window_type_parsing() -> None:
    assert WindowType.parse("hanning") is WindowType.HANNING
    assert WindowType.parse("hann") is WindowType.HANNING
    assert WindowType.parse("Rectangular") is WindowType.RECTANGULAR
    with pytest.raises(ConfigError):
        AnalysisConfig().with_window_type("blackman")


def test_from_dict_parses_wire_format() -> None:
    config = AnalysisConfig.from_dict({
        "numberOfLines": "2048",
        "windowType": "Rectangular",
        "minFrequency": "5",
        "maxFrequency": "2000",
        "highPassFrequency": "10",
        "lowPassFrequency": "1500",
        "bandRange": "50",
    })
    assert config == AnalysisConfig(
        number_of_lines=2048,
        window_type=WindowType.RECTANGULAR,
        min_frequency=5.0,
        max_frequency=2000.0,
        high_pass_frequency=10.0,
        low_pass_frequency=1500.0,
        band_range=50.0,
    )


def test_from_dict_keeps_base_values_for_missing_keys() -> None:
    base = AnalysisConfig().with_high_pass_frequency(10)
    config = AnalysisConfig.from_dict({"band_range": 50}, base=base)
    assert config.high_pass_frequency == 10
    assert config.band_range == 50


def test_from_dict_rejects_garbage() -> None:
    with pytest.raises(ConfigError, match="numberOfLines"):
        AnalysisConfig.from_dict({"numberOfLines": "many"})


@pytest.mark.parametrize("value", ["inf", "-inf", "nan", float("inf")])
def test_from_dict_rejects_non_finite_line_counts(value) -> None:
    with pytest.raises(ConfigError, match="numberOfLines"):
        AnalysisConfig.from_dict({"numberOfLines": value})


def test_to_dict_is_json_friendly() -> None:
    d = AnalysisConfig().with_high_pass_frequency(10).to_dict()
    assert d["window_type"] == "Hanning"
    assert d["integration_allowed"] is True


def test_presets_are_valid() -> None:
    for preset in ANALYSIS_PRESETS.values():
        assert preset.config.validate() is None, preset.name
    assert get_preset("velocity_iso").config.integration_allowed
    assert get_preset("does_not_exist") is None
    assert {p["name"] for p in list_presets()} == set(ANALYSIS_PRESETS)
