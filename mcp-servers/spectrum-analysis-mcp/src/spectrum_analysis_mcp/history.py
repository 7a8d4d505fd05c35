"""
In-memory history of spectrum results, keyed by timestamp.

Entries are only added by explicit ``put`` calls and are never evicted;
retention is up to the caller. Timestamps are opaque strings compared
lexically, so ISO-8601 timestamps in a single timezone sort correctly.

Usage:
    history.put("2025-01-01T10:00:00Z", result)
    history.get("2025-01-01T10:00:00Z")
    history.trend("2025-01-01", "2025-02-01")
"""

from __future__ import annotations

from typing import Optional

from .models import SpectrumResult, TrendSeries


class HistoryStore:
    """Timestamp -> SpectrumResult mapping with trend queries."""

    def __init__(self) -> None:
        self._entries: dict[str, SpectrumResult] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, timestamp: str) -> bool:
        return timestamp in self._entries

    def put(self, timestamp: str, result: SpectrumResult) -> str:
        """Store a result, overwriting any entry at the same timestamp."""
        self._entries[timestamp] = result
        return timestamp

    def get(self, timestamp: str) -> SpectrumResult | None:
        return self._entries.get(timestamp)

    def remove(self, timestamp: str) -> bool:
        return self._entries.pop(timestamp, None) is not None

    def list_timestamps(self) -> list[str]:
        return sorted(self._entries)

    def list_entries(self) -> list[dict]:
        """Return summaries of all stored entries, oldest first."""
        return [
            {"timestamp": ts, **self._entries[ts].summary()}
            for ts in self.list_timestamps()
        ]

    def trend(self, start_date: str, end_date: str) -> TrendSeries:
        """
        Highest band peak per stored timestamp within [start_date, end_date].

        Invalid results and timestamps outside the range are skipped silently.
        """
        return {
            ts: result.max_peak
            for ts, result in sorted(self._entries.items())
            if result.is_valid and start_date <= ts <= end_date
        }

    def latest(self, before: Optional[str] = None) -> tuple[str, SpectrumResult] | None:
        """Most recent valid entry, optionally strictly before a timestamp."""
        candidates = [
            ts for ts, r in self._entries.items()
            if r.is_valid and (before is None or ts < before)
        ]
        if not candidates:
            return None
        ts = max(candidates)
        return ts, self._entries[ts]
