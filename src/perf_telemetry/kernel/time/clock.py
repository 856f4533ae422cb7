"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock for deterministic testing.

    ``now`` is wall-clock time used for labelling exports; ``monotonic_ms``
    is the only source used for measuring durations.
    """

    def now(self) -> datetime: ...
    def monotonic_ms(self) -> float: ...


class SystemClock:
    """Production clock backed by ``datetime.now(UTC)`` and ``time.perf_counter``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic_ms(self) -> float:
        return time.perf_counter() * 1000.0


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    Both readings move together when :meth:`advance` is called.
    """

    def __init__(self, fixed: datetime | None = None, monotonic_ms: float = 0.0) -> None:
        self._fixed = fixed or datetime(2024, 1, 1, tzinfo=UTC)
        self._monotonic_ms = monotonic_ms

    def now(self) -> datetime:
        return self._fixed

    def monotonic_ms(self) -> float:
        return self._monotonic_ms

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        delta = timedelta(**kwargs)
        self._fixed += delta
        self._monotonic_ms += delta.total_seconds() * 1000.0


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
