"""
Spectrum engine: configuration state plus the analysis operations.

The engine keeps the current ``AnalysisConfig`` and a ``HistoryStore``.
Setters replace the config value and raise ``ConfigError`` on bad input,
leaving the previous config in place. Computation and integration never
raise for domain failures; they return invalid ``SpectrumResult``s.

Not thread-safe. Callers that need different parameters concurrently must
use separate engines, or serialise configure-then-compute sequences.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .bands import peak_in_band
from .config import AnalysisConfig, ConfigError, WindowType
from .constants import MAX_CALCULATION_TIME_MS
from .fft_analysis import compute_spectrum
from .history import HistoryStore
from .integration import integrate
from .models import SpectrumResult, TrendSeries, Waveform
from .speed import estimate_speed

logger = logging.getLogger(__name__)


class SpectrumEngine:
    """Configurable spectrum calculator with a result history."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        time_budget_ms: float = MAX_CALCULATION_TIME_MS,
    ) -> None:
        self.config = config if config is not None else AnalysisConfig()
        self.time_budget_ms = time_budget_ms
        self.history = HistoryStore()

    # -- configuration ----------------------------------------------------

    def _update(self, setter: Callable[[], AnalysisConfig]) -> AnalysisConfig:
        try:
            self.config = setter()
        except ConfigError as e:
            logger.warning(f"Configuration rejected: {e}")
            raise
        return self.config

    def set_number_of_lines(self, lines: int) -> AnalysisConfig:
        return self._update(lambda: self.config.with_number_of_lines(lines))

    def set_window_type(self, window: WindowType | str) -> AnalysisConfig:
        return self._update(lambda: self.config.with_window_type(window))

    def set_min_frequency(self, frequency: float) -> AnalysisConfig:
        return self._update(lambda: self.config.with_min_frequency(frequency))

    def set_max_frequency(self, frequency: float) -> AnalysisConfig:
        return self._update(lambda: self.config.with_max_frequency(frequency))

    def set_high_pass_frequency(self, frequency: float) -> AnalysisConfig:
        return self._update(lambda: self.config.with_high_pass_frequency(frequency))

    def set_low_pass_frequency(self, frequency: float) -> AnalysisConfig:
        return self._update(lambda: self.config.with_low_pass_frequency(frequency))

    def set_band_range(self, band_range: float) -> AnalysisConfig:
        return self._update(lambda: self.config.with_band_range(band_range))

    def configure(self, params: Mapping[str, Any]) -> AnalysisConfig:
        """Apply several wire-format parameters at once (all or nothing)."""
        return self._update(lambda: AnalysisConfig.from_dict(params, base=self.config))

    # -- analysis ---------------------------------------------------------

    def compute_spectrum(self, waveform: Waveform) -> SpectrumResult:
        return compute_spectrum(waveform, self.config, self.time_budget_ms)

    def integrate(self, result: SpectrumResult) -> SpectrumResult:
        """Integrate one step, checked against the engine's current config."""
        return integrate(result, self.config)

    def peak_in_band(self, result: SpectrumResult, start_freq: float, end_freq: float) -> Optional[float]:
        return peak_in_band(result, start_freq, end_freq)

    def estimate_speed(self, timestamp: str, result: SpectrumResult) -> Optional[float]:
        rpm = estimate_speed(result)
        if rpm is None:
            logger.info(f"No speed estimate for {timestamp}")
        return rpm

    # -- history ----------------------------------------------------------

    def store(self, timestamp: str, result: SpectrumResult) -> None:
        self.history.put(timestamp, result)

    def retrieve(self, timestamp: str) -> Optional[SpectrumResult]:
        return self.history.get(timestamp)

    def trend(self, start_date: str, end_date: str) -> TrendSeries:
        return self.history.trend(start_date, end_date)
