"""
generate_sample_data.py — Create synthetic waveforms for the spectrum server.

Writes JSON files whose ``signal`` / ``sample_rate`` / ``quantity`` fields
can be passed straight to the ``process_waveform`` tool, so the band and
integration pipeline can be checked without a sensor.

Usage:
    python generate_sample_data.py

Outputs:
    examples/sample_data/pure_50hz.json
    examples/sample_data/harmonics_50hz.json
    examples/sample_data/run_up_velocity.json
"""

import json
import os

import numpy as np


def generate_signal(
    duration: float,
    fs: float,
    components: list[dict],
    noise_level: float = 0.0,
    seed: int = 42,
) -> np.ndarray:
    """
    Sum of sinusoids plus optional Gaussian noise.

    Args:
        duration: Signal duration in seconds.
        fs: Sampling frequency in Hz.
        components: List of dicts with 'frequency', 'amplitude', and optional 'phase'.
        noise_level: RMS noise level.
        seed: Random seed for reproducibility.
    """
    rng = np.random.default_rng(seed)
    n = int(duration * fs)
    t = np.arange(n) / fs
    signal = np.zeros(n)

    for comp in components:
        signal += comp["amplitude"] * np.sin(2 * np.pi * comp["frequency"] * t + comp.get("phase", 0.0))

    if noise_level > 0:
        signal += rng.normal(0, noise_level, n)
    return signal


def _payload(signal: np.ndarray, fs: float, quantity: str, description: str, config: dict) -> dict:
    return {
        "signal": np.round(signal, 8).tolist(),
        "sample_rate": fs,
        "quantity": quantity,
        "n_samples": len(signal),
        "metadata": {"description": description, "suggested_config": config},
    }


def main():
    out_dir = os.path.join(os.path.dirname(__file__), "sample_data")
    os.makedirs(out_dir, exist_ok=True)

    fs = 10000.0
    velocity_config = {
        "min_frequency": 10,
        "max_frequency": 1000,
        "high_pass_frequency": 10,
        "band_range": 25,
    }

    samples = {
        "pure_50hz": _payload(
            generate_signal(1.0, fs, [{"frequency": 50.0, "amplitude": 1.0}]),
            fs, "Acceleration",
            "Pure 50 Hz tone, amplitude 1 — the 35-60 Hz band should hold the peak",
            velocity_config,
        ),
        "harmonics_50hz": _payload(
            generate_signal(
                1.0, fs,
                components=[
                    {"frequency": 50.0, "amplitude": 1.0},
                    {"frequency": 100.0, "amplitude": 0.5},
                    {"frequency": 150.0, "amplitude": 0.3},
                ],
                noise_level=0.01,
            ),
            fs, "Acceleration",
            "50 Hz running speed with 2x and 3x harmonics (expected speed ~3000 RPM)",
            velocity_config,
        ),
    }

    # Slow run-up: frequency sweeps 20 -> 60 Hz over 2 s
    t = np.arange(int(2.0 * fs)) / fs
    sweep = 0.02 * np.sin(2 * np.pi * (20.0 * t + 10.0 * t ** 2))
    samples["run_up_velocity"] = _payload(
        sweep, fs, "Velocity",
        "Velocity run-up 20-60 Hz; integrates once to displacement",
        velocity_config,
    )

    for name, payload in samples.items():
        path = os.path.join(out_dir, f"{name}.json")
        with open(path, "w") as f:
            json.dump(payload, f)
        print(f"  {name}.json — {payload['n_samples']} samples @ {fs:.0f} Hz")

    print(f"\nSample data written to: {out_dir}")


if __name__ == "__main__":
    main()
