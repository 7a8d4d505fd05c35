"""
spectrum_demo.py — Walk through the spectrum engine without the MCP server.

Configures an engine, computes the spectrum of a 50/100/150 Hz composite,
queries bands, stores and retrieves the result, integrates to velocity and
displacement, estimates the machine speed and shows both failure channels.

Usage:
    python spectrum_demo.py
"""

import logging
from datetime import datetime, timezone

from generate_sample_data import generate_signal

from spectrum_analysis_mcp import ConfigError, Quantity, SpectrumEngine, Waveform, WindowType


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    engine = SpectrumEngine()
    engine.set_number_of_lines(1024)
    engine.set_window_type(WindowType.HANNING)
    engine.set_min_frequency(10)
    engine.set_max_frequency(1000)
    engine.set_high_pass_frequency(10)
    engine.set_low_pass_frequency(1000)

    fs = 10000.0
    data = generate_signal(
        1.0, fs,
        components=[
            {"frequency": 50.0, "amplitude": 1.0},
            {"frequency": 100.0, "amplitude": 0.5},
            {"frequency": 150.0, "amplitude": 0.3},
        ],
    )
    waveform = Waveform(data, fs, Quantity.ACCELERATION)
    print(f"Sample rate: {fs:.0f} Hz, samples: {waveform.n_samples}")

    spectrum = engine.compute_spectrum(waveform)
    if not spectrum.is_valid:
        print(f"Spectrum calculation failed: {spectrum.error_message}")
        return

    print(f"Resolution: {spectrum.resolution:.4f} Hz, bands: {len(spectrum.band_peaks)}")
    for start, end in [(35, 60), (85, 110), (135, 160), (40, 60)]:
        peak = engine.peak_in_band(spectrum, start, end)
        print(f"  Peak in {start}-{end} Hz: {peak if peak is not None else 'not computed'}")

    timestamp = datetime.now(timezone.utc).isoformat()
    engine.store(timestamp, spectrum)
    print(f"Stored and retrieved: {engine.retrieve(timestamp) is spectrum}")

    velocity = engine.integrate(spectrum)
    print(f"Integrated: {velocity.quantity.value} (valid={velocity.is_valid})")
    displacement = engine.integrate(velocity)
    print(f"Integrated again: {displacement.quantity.value} (valid={displacement.is_valid})")
    beyond = engine.integrate(displacement)
    print(f"Third integration: valid={beyond.is_valid}, reason: {beyond.error_message}")

    rpm = engine.estimate_speed(timestamp, spectrum)
    print(f"Machine speed: {f'{rpm:.0f} RPM' if rpm is not None else 'no estimate'}")

    # Hard error: setter rejects and keeps the previous value
    try:
        engine.set_number_of_lines(50)
    except ConfigError as e:
        print(f"Invalid number of lines rejected: {e}")

    # Soft error: integration without high-pass comes back as an invalid result
    engine.set_high_pass_frequency(0)
    unfiltered = engine.compute_spectrum(waveform)
    rejected = engine.integrate(unfiltered)
    print(f"Integration without high-pass: valid={rejected.is_valid}, reason: {rejected.error_message}")

    print(f"Trend: {engine.trend('2000-01-01', '9999-12-31')}")


if __name__ == "__main__":
    main()
