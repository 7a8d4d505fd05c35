"""Limits and failure messages shared by the analysis modules."""

from __future__ import annotations

MIN_LINES = 100
MAX_LINES = 102400
MAX_SAMPLE_RATE = 131072          # Hz
MAX_WAVEFORM_SECONDS = 5 * 60     # 5 minutes at MAX_SAMPLE_RATE
MAX_WAVEFORM_SAMPLES = MAX_SAMPLE_RATE * MAX_WAVEFORM_SECONDS
MAX_CALCULATION_TIME_MS = 100.0
SAMPLE_RATE_FACTOR = 2.56         # required fs / f_max ratio
PRECISION = 10                    # decimal digits kept on magnitudes

# ---------------------------------------------------------------------------
# Reasons carried by invalid SpectrumResults (surfaced verbatim to hosts)
# ---------------------------------------------------------------------------

INVALID_PARAMETERS = "Invalid spectrum parameters"
INVALID_FILTER = "High pass frequency must be smaller than low pass frequency"
SAMPLE_RATE_TOO_LOW = (
    f"Sample rate must be at least {SAMPLE_RATE_FACTOR} times higher than maximum frequency"
)
SAMPLE_RATE_TOO_HIGH = f"Sample rate cannot exceed {MAX_SAMPLE_RATE} Hz"
WAVEFORM_TOO_LONG = (
    f"Time waveform length exceeds maximum allowed "
    f"({MAX_WAVEFORM_SECONDS // 60} minutes at {MAX_SAMPLE_RATE} Hz)"
)
WAVEFORM_EMPTY = "Time waveform contains no samples"
TIME_BUDGET_EXCEEDED = (
    "Spectrum calculation time exceeded maximum allowed ({budget:g} ms)"
)
INTEGRATION_NOT_ALLOWED = (
    "integration not allowed without high-pass filter "
    "(set a high pass frequency above 0 Hz)"
)
DOUBLE_INTEGRATION = "cannot integrate displacement (double integration is not supported)"
