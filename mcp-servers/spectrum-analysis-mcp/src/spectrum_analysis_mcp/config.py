"""
Analysis configuration for spectrum computation.

An ``AnalysisConfig`` is an immutable value. Every ``with_*`` method checks
its own field and either returns an updated copy or raises ``ConfigError``
without touching the original. The joint invariants (line bounds, min < max,
band range bounds, filter ordering) are re-checked by ``validate()`` right
before each computation, since individually valid setters can still leave
the parameters jointly inconsistent.

Also provides named presets for common machine classes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional

from .constants import INVALID_FILTER, INVALID_PARAMETERS, MAX_LINES, MIN_LINES


class ConfigError(ValueError):
    """Raised when a configuration setter rejects its value."""


class WindowType(str, Enum):
    HANNING = "Hanning"
    RECTANGULAR = "Rectangular"

    @classmethod
    def parse(cls, value: "WindowType | str") -> "WindowType":
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).lower() in (member.value.lower(), member.name.lower()):
                return member
        if str(value).lower() == "hann":
            return cls.HANNING
        raise ConfigError(
            f"Unknown window type '{value}'. Use one of: {[m.value for m in cls]}"
        )


# Wire-format keys (as sent by the web client) -> setter name, in apply order
_WIRE_FIELDS = (
    ("numberOfLines", "with_number_of_lines", int),
    ("windowType", "with_window_type", str),
    ("minFrequency", "with_min_frequency", float),
    ("maxFrequency", "with_max_frequency", float),
    ("highPassFrequency", "with_high_pass_frequency", float),
    ("lowPassFrequency", "with_low_pass_frequency", float),
    ("bandRange", "with_band_range", float),
)


def _check_frequency(frequency: float) -> float:
    if frequency < 0:
        raise ConfigError("Frequency cannot be negative")
    return float(frequency)


@dataclass(frozen=True)
class AnalysisConfig:
    """Spectrum analysis parameters. A high/low pass of 0 disables that filter."""
    number_of_lines: int = 1024
    window_type: WindowType = WindowType.HANNING
    min_frequency: float = 0.0
    max_frequency: float = 1000.0
    high_pass_frequency: float = 0.0
    low_pass_frequency: float = 0.0
    band_range: float = 25.0

    # -- setters (fail fast, return a new config) ------------------------

    def with_number_of_lines(self, lines: int) -> AnalysisConfig:
        if lines < MIN_LINES:
            raise ConfigError(f"Number of lines cannot be less than {MIN_LINES}")
        if lines > MAX_LINES:
            raise ConfigError(f"Number of lines cannot exceed {MAX_LINES}")
        return replace(self, number_of_lines=int(lines))

    def with_window_type(self, window: WindowType | str) -> AnalysisConfig:
        return replace(self, window_type=WindowType.parse(window))

    def with_min_frequency(self, frequency: float) -> AnalysisConfig:
        return replace(self, min_frequency=_check_frequency(frequency))

    def with_max_frequency(self, frequency: float) -> AnalysisConfig:
        return replace(self, max_frequency=_check_frequency(frequency))

    def with_high_pass_frequency(self, frequency: float) -> AnalysisConfig:
        return replace(self, high_pass_frequency=_check_frequency(frequency))

    def with_low_pass_frequency(self, frequency: float) -> AnalysisConfig:
        return replace(self, low_pass_frequency=_check_frequency(frequency))

    def with_band_range(self, band_range: float) -> AnalysisConfig:
        if band_range <= 0:
            raise ConfigError("Band range must be positive")
        if band_range > self.max_frequency:
            raise ConfigError("Band range cannot be larger than max frequency")
        return replace(self, band_range=float(band_range))

    # -- joint checks -----------------------------------------------------

    @property
    def parameters_valid(self) -> bool:
        return (
            MIN_LINES <= self.number_of_lines <= MAX_LINES
            and self.min_frequency >= 0
            and self.max_frequency > self.min_frequency
            and 0 < self.band_range <= self.max_frequency
        )

    @property
    def filter_valid(self) -> bool:
        if self.high_pass_frequency == 0 or self.low_pass_frequency == 0:
            return True
        return self.high_pass_frequency < self.low_pass_frequency

    @property
    def integration_allowed(self) -> bool:
        """Integration needs an active high-pass filter."""
        return self.high_pass_frequency > 0

    def validate(self) -> Optional[str]:
        """Return the reason the parameters are jointly invalid, or None."""
        if not self.parameters_valid:
            return INVALID_PARAMETERS
        if not self.filter_valid:
            return INVALID_FILTER
        return None

    # -- (de)serialisation ------------------------------------------------

    @classmethod
    def from_dict(
        cls,
        params: Mapping[str, Any],
        base: Optional[AnalysisConfig] = None,
    ) -> AnalysisConfig:
        """
        Build a config from wire-format parameters.

        Accepts the camelCase keys posted by the web client (numeric values
        may be strings) as well as the snake_case field names. Missing keys
        keep the value from ``base`` (or the defaults). Setters are applied
        in field order, so ``maxFrequency`` is in place before ``bandRange``
        is checked against it.
        """
        config = base if base is not None else cls()
        for wire_key, setter, convert in _WIRE_FIELDS:
            field_name = setter[len("with_"):]
            value = params.get(wire_key, params.get(field_name))
            if value is None or value == "":
                continue
            try:
                value = convert(float(value)) if convert is int else convert(value)
            except (TypeError, ValueError, OverflowError):
                raise ConfigError(f"Invalid value for {wire_key}: {value!r}")
            config = getattr(config, setter)(value)
        return config

    def to_dict(self) -> dict:
        d = asdict(self)
        d["window_type"] = self.window_type.value
        d["integration_allowed"] = self.integration_allowed
        return d


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

@dataclass
class AnalysisPreset:
    """Named analysis configuration for a typical use case."""
    name: str
    description: str
    config: AnalysisConfig
    use_case: str


ANALYSIS_PRESETS = {
    "general_monitoring": AnalysisPreset(
        name="general_monitoring",
        description="0-1 kHz overview with 25 Hz bands, no filtering",
        config=AnalysisConfig(),
        use_case="baseline, trending",
    ),
    "velocity_iso": AnalysisPreset(
        name="velocity_iso",
        description="10-1000 Hz with 10 Hz high-pass, ready for integration to velocity",
        config=AnalysisConfig(
            min_frequency=10.0,
            max_frequency=1000.0,
            high_pass_frequency=10.0,
            low_pass_frequency=1000.0,
            band_range=25.0,
        ),
        use_case="unbalance, misalignment, iso_severity",
    ),
    "low_speed": AnalysisPreset(
        name="low_speed",
        description="2-200 Hz, 5 Hz bands and 3200 lines for slow machines",
        config=AnalysisConfig(
            number_of_lines=3200,
            min_frequency=2.0,
            max_frequency=200.0,
            high_pass_frequency=2.0,
            band_range=5.0,
        ),
        use_case="low_rpm_machines, fans, cooling_towers",
    ),
    "high_frequency": AnalysisPreset(
        name="high_frequency",
        description="0-10 kHz with 250 Hz bands for bearing and gear mesh energy",
        config=AnalysisConfig(
            number_of_lines=6400,
            max_frequency=10000.0,
            band_range=250.0,
        ),
        use_case="bearing_fault_detection, gear_mesh",
    ),
}


def get_preset(name: str) -> Optional[AnalysisPreset]:
    """Get an analysis preset by name."""
    return ANALYSIS_PRESETS.get(name)


def list_presets() -> list[dict]:
    """List all available presets with their parameters."""
    return [
        {
            "name": p.name,
            "description": p.description,
            "use_case": p.use_case,
            **p.config.to_dict(),
        }
        for p in ANALYSIS_PRESETS.values()
    ]
