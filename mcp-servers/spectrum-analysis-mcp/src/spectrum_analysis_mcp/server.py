"""
Spectrum Analysis MCP Server.

Exposes the banded spectrum engine via the Model Context Protocol: analysis
configuration, spectrum computation with optional integration, band peak
queries, machine speed estimation and a timestamped history with peak
trends.

Configuration errors are returned as ``{"error": ...}``. Computation
failures come back as spectra with ``is_valid = false`` and an
``error_message``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

import numpy as np
from mcp.server.fastmcp import FastMCP

from .config import ConfigError, get_preset, list_presets
from .engine import SpectrumEngine
from .models import Quantity, SpectrumResult, Waveform

# Configure logging to stderr (required for STDIO MCP servers)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("spectrum-analysis-mcp")

mcp = FastMCP(
    "spectrum-analysis",
    instructions=(
        "Banded vibration spectrum toolkit. Configure the analysis (lines, "
        "window, frequency range, high/low pass, band width), then call "
        "process_waveform with time-domain samples. Pass a timestamp to keep "
        "the result in the server-side history for later band queries, speed "
        "estimates and peak trends.\n\n"
        "Integration (acceleration -> velocity -> displacement) requires a "
        "high pass frequency above 0 Hz. Always check is_valid before using "
        "a spectrum."
    ),
)

engine = SpectrumEngine()


# ── Helpers ───────────────────────────────────────────────────────────────

def _now_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _visualization_data(result: SpectrumResult, max_frequency: float) -> dict:
    """Frequency bins and magnitudes from 0 Hz up to max_frequency."""
    if not result.is_valid or result.resolution <= 0:
        return {"frequency_bins": [], "magnitude_values": []}
    n_bins = int(np.floor(max_frequency / result.resolution)) + 1
    return {
        "frequency_bins": result.frequencies[:n_bins].tolist(),
        "magnitude_values": result.spectrum[:n_bins].tolist(),
    }


def _stored(timestamp: str) -> SpectrumResult:
    result = engine.retrieve(timestamp)
    if result is None:
        available = engine.history.list_timestamps()
        raise ValueError(
            f"No spectrum stored at '{timestamp}'. "
            f"Available: {available or '(empty — call process_waveform with a timestamp)'}."
        )
    return result


# ── Configuration tools ───────────────────────────────────────────────────

@mcp.tool()
def configure_analysis(
    number_of_lines: int | None = None,
    window_type: str | None = None,
    min_frequency: float | None = None,
    max_frequency: float | None = None,
    high_pass_frequency: float | None = None,
    low_pass_frequency: float | None = None,
    band_range: float | None = None,
) -> dict:
    """
    Update the analysis configuration. Omitted parameters keep their value.
    Either every given value is applied or none is.

    Args:
        number_of_lines: Spectrum lines, 100 to 102400.
        window_type: 'Hanning' or 'Rectangular'.
        min_frequency: Lower edge of the band grid in Hz.
        max_frequency: Upper edge of the band grid in Hz (sample rate must be >= 2.56x this).
        high_pass_frequency: High-pass cutoff in Hz, 0 disables. Required > 0 for integration.
        low_pass_frequency: Low-pass cutoff in Hz, 0 disables.
        band_range: Band width in Hz (must not exceed max_frequency).
    """
    params = {
        "number_of_lines": number_of_lines,
        "window_type": window_type,
        "min_frequency": min_frequency,
        "max_frequency": max_frequency,
        "high_pass_frequency": high_pass_frequency,
        "low_pass_frequency": low_pass_frequency,
        "band_range": band_range,
    }
    try:
        config = engine.configure({k: v for k, v in params.items() if v is not None})
    except ConfigError as e:
        return {"error": str(e), "config": engine.config.to_dict()}
    return {"config": config.to_dict()}


@mcp.tool()
def get_analysis_config() -> dict:
    """Return the current analysis configuration."""
    return {"config": engine.config.to_dict()}


@mcp.tool()
def list_analysis_presets() -> dict:
    """List the built-in analysis presets."""
    return {"presets": list_presets()}


@mcp.tool()
def apply_analysis_preset(name: str) -> dict:
    """
    Replace the current configuration with a named preset.

    Args:
        name: Preset name (see list_analysis_presets).
    """
    preset = get_preset(name)
    if preset is None:
        return {
            "error": f"Preset '{name}' not found.",
            "available": [p["name"] for p in list_presets()],
        }
    engine.config = preset.config
    logger.info(f"Applied analysis preset {name}")
    return {"preset": name, "config": engine.config.to_dict()}


# ── Spectrum tools ────────────────────────────────────────────────────────

@mcp.tool()
def process_waveform(
    signal: list[float],
    sample_rate: float,
    quantity: str = "Acceleration",
    integrate: bool = False,
    timestamp: str | None = None,
    include_visualization: bool = True,
) -> dict:
    """
    Compute the banded spectrum of a time waveform with the current configuration.

    Args:
        signal: Time-domain samples.
        sample_rate: Sampling frequency in Hz (max 131072).
        quantity: 'Acceleration', 'Velocity' or 'Displacement'.
        integrate: Also return the spectrum integrated one step (needs high pass > 0).
        timestamp: If given, store the spectrum in the history under this key.
        include_visualization: Include frequency bins / magnitudes up to max_frequency.
    """
    try:
        waveform = Waveform(np.asarray(signal, dtype=np.float64), sample_rate, Quantity.parse(quantity))
    except ValueError as e:
        return {"error": str(e)}

    spectrum = engine.compute_spectrum(waveform)
    response = {
        "spectrum": spectrum.to_dict(),
        "integrated_spectrum": None,
        "error": None if spectrum.is_valid else spectrum.error_message,
    }

    visualization = {}
    if include_visualization:
        visualization = _visualization_data(spectrum, engine.config.max_frequency)

    if integrate and spectrum.is_valid:
        integrated = engine.integrate(spectrum)
        response["integrated_spectrum"] = integrated.to_dict()
        if include_visualization:
            integrated_vis = _visualization_data(integrated, engine.config.max_frequency)
            visualization["integrated_frequency_bins"] = integrated_vis["frequency_bins"]
            visualization["integrated_magnitude_values"] = integrated_vis["magnitude_values"]

    if include_visualization:
        response["visualization_data"] = visualization

    if timestamp is not None:
        engine.store(timestamp, spectrum)
        response["timestamp"] = timestamp
    return response


@mcp.tool()
def integrate_stored_spectrum(timestamp: str, store_as: str | None = None) -> dict:
    """
    Integrate a stored spectrum one step (acceleration -> velocity -> displacement).
    Uses the current configuration: the high pass frequency must be > 0 now.

    Args:
        timestamp: Key of the stored spectrum.
        store_as: Optional key to store the integrated spectrum under.
    """
    try:
        result = _stored(timestamp)
    except ValueError as e:
        return {"error": str(e)}
    integrated = engine.integrate(result)
    if store_as is not None:
        engine.store(store_as, integrated)
    return {"spectrum": integrated.to_dict(), "error": integrated.error_message}


@mcp.tool()
def get_peak_in_band(timestamp: str, start_frequency: float, end_frequency: float) -> dict:
    """
    Return the stored peak for an exact band of a stored spectrum.
    Bands must lie on the configured grid (min_frequency + k * band_range).

    Args:
        timestamp: Key of the stored spectrum.
        start_frequency: Band start in Hz.
        end_frequency: Band end in Hz.
    """
    try:
        result = _stored(timestamp)
    except ValueError as e:
        return {"error": str(e)}
    peak = engine.peak_in_band(result, start_frequency, end_frequency)
    return {
        "band": [start_frequency, end_frequency],
        "peak": peak,
        "computed": peak is not None,
    }


@mcp.tool()
def estimate_machine_speed(timestamp: str | None = None) -> dict:
    """
    Estimate running speed (RPM) from a stored spectrum.

    Heuristic: the first band whose peak is at least twice the mean band
    peak is taken as the running-speed band.

    Args:
        timestamp: Key of the stored spectrum. Defaults to the most recent valid entry.
    """
    if timestamp is None:
        latest = engine.history.latest()
        if latest is None:
            return {"error": "No valid spectrum stored yet."}
        timestamp, result = latest
    else:
        try:
            result = _stored(timestamp)
        except ValueError as e:
            return {"error": str(e)}
    rpm = engine.estimate_speed(timestamp, result)
    return {
        "timestamp": timestamp,
        "rpm": rpm,
        "frequency_hz": rpm / 60.0 if rpm is not None else None,
        "estimated": rpm is not None,
    }


# ── History tools ─────────────────────────────────────────────────────────

@mcp.tool()
def get_stored_spectrum(timestamp: str, include_spectrum: bool = False) -> dict:
    """
    Retrieve a stored spectrum.

    Args:
        timestamp: Key of the stored spectrum.
        include_spectrum: Also return the line-limited magnitude array.
    """
    try:
        result = _stored(timestamp)
    except ValueError as e:
        return {"error": str(e)}
    return {"timestamp": timestamp, "spectrum": result.to_dict(include_spectrum=include_spectrum)}


@mcp.tool()
def list_stored_spectra() -> dict:
    """List all spectra in the server-side history with compact summaries."""
    entries = engine.history.list_entries()
    return {"count": len(entries), "spectra": entries}


@mcp.tool()
def get_peak_trend(start_date: str, end_date: str | None = None) -> dict:
    """
    Highest band peak per stored timestamp within [start_date, end_date].
    Timestamps are compared as strings; invalid spectra are skipped.

    Args:
        start_date: Inclusive lower bound (e.g. '2025-01-01').
        end_date: Inclusive upper bound. Defaults to now (UTC, ISO-8601).
    """
    trend = engine.trend(start_date, end_date or _now_timestamp())
    return {
        "trend": [{"timestamp": ts, "max_peak": value} for ts, value in trend.items()],
        "count": len(trend),
    }


# ── Resource: analysis capabilities ──────────────────────────────────────

@mcp.resource("spectrum-analysis://capabilities")
def analysis_capabilities() -> str:
    """List all analysis capabilities of this server."""
    return json.dumps({
        "spectrum": [
            "Hanning or rectangular window",
            "Zero padding to the next power of two",
            "Magnitude spectrum |X|/N at 10-decimal precision",
            "Frequency-domain high-pass / low-pass",
            "Fixed-width bands with peak per band",
        ],
        "integration": [
            "Acceleration -> Velocity -> Displacement (divide by 2*pi*f)",
            "Requires high pass frequency > 0",
            "Displacement cannot be integrated further",
        ],
        "speed": [
            "Running speed heuristic: first band >= 2x mean band peak",
        ],
        "history": [
            "Timestamped server-side storage",
            "Peak trend over a date range",
        ],
        "limits": {
            "lines": [100, 102400],
            "max_sample_rate_hz": 131072,
            "max_duration_s": 300,
            "min_sample_rate_factor": 2.56,
            "time_budget_ms": engine.time_budget_ms,
        },
    }, indent=2)


if __name__ == "__main__":
    mcp.run(transport="stdio")
