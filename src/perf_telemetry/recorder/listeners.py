"""Recorder – listener registry and subscription handles."""
from __future__ import annotations

import itertools
import threading
from typing import Callable

from perf_telemetry.recorder.models import Metric

MetricListener = Callable[[Metric], None]


class ListenerRegistry:
    """Registration table keyed by an integer handle.

    Handles are never reused, so registering the same callable twice gives
    two independent entries, and removal never depends on object identity.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, MetricListener] = {}
        self._handles = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, listener: MetricListener) -> int:
        with self._lock:
            handle = next(self._handles)
            self._listeners[handle] = listener
            return handle

    def remove(self, handle: int) -> bool:
        with self._lock:
            return self._listeners.pop(handle, None) is not None

    def snapshot(self) -> list[tuple[int, MetricListener]]:
        """Current registrations in registration order."""
        with self._lock:
            return list(self._listeners.items())

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._listeners

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


class Subscription:
    """Handle returned by ``add_listener``; call it (or :meth:`unsubscribe`) to stop."""

    def __init__(self, registry: ListenerRegistry, handle: int) -> None:
        self._registry = registry
        self.handle = handle
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._registry.remove(self.handle)

    def __call__(self) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        return f"Subscription(handle={self.handle!r}, active={self._active!r})"


__all__ = ["ListenerRegistry", "MetricListener", "Subscription"]
