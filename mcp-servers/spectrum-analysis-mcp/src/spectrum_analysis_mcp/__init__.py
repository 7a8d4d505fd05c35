"""Spectrum Analysis MCP Server - banded vibration spectra, integration and trends."""

from .config import AnalysisConfig, ConfigError, WindowType
from .engine import SpectrumEngine
from .models import Quantity, SpectrumResult, Waveform


def main():
    """Entry point for the MCP server."""
    from .server import mcp

    mcp.run(transport="stdio")


__all__ = [
    "AnalysisConfig",
    "ConfigError",
    "Quantity",
    "SpectrumEngine",
    "SpectrumResult",
    "Waveform",
    "WindowType",
    "main",
]
