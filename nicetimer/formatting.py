"""Human-readable duration strings shared by the front-ends."""

from __future__ import annotations


def format_clock(seconds: int) -> str:
    """``MM:SS`` countdown display (minutes are not wrapped at 60)."""
    seconds = max(0, seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_total(seconds: int) -> str:
    """Compact total for catalog rows: ``1h 5m`` or ``4m 30s``."""
    seconds = max(0, seconds)
    if seconds >= 3600:
        return f"{seconds // 3600}h {(seconds % 3600) // 60}m"
    return f"{seconds // 60}m {seconds % 60}s"


def split_duration(minutes: int, seconds: int) -> int:
    """Combine minute/second picker values into whole seconds."""
    return minutes * 60 + seconds
