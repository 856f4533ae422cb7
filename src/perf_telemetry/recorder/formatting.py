"""Recorder – display helpers for dashboards and log lines."""
from __future__ import annotations


def format_duration(ms: float | None) -> str:
    """Render a millisecond duration with a unit that keeps it readable.

    >>> format_duration(0.5)
    '500.00µs'
    >>> format_duration(12.345)
    '12.35ms'
    >>> format_duration(2500)
    '2.50s'
    """
    if ms is None:
        return "N/A"
    if ms < 1:
        return f"{ms * 1000:.2f}µs"
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"


def format_rate(percentage: float) -> str:
    return f"{percentage:.1f}%"


__all__ = ["format_duration", "format_rate"]
