"""Recorder – ``@tracked`` decorator."""
from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from perf_telemetry.recorder.models import MetricKind
from perf_telemetry.recorder.recorder import PerformanceRecorder

T = TypeVar("T")


def tracked(
    recorder: PerformanceRecorder,
    name: str | None = None,
    *,
    kind: MetricKind | str = MetricKind.CUSTOM,
    measure_response: bool = False,
    **metadata: Any,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator: records every call of an async function on *recorder*.

    The metric name defaults to the function's ``__qualname__``; extra
    keyword arguments become the metric's metadata.
    """

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        metric_name = name or fn.__qualname__

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await recorder.track(
                metric_name,
                lambda: fn(*args, **kwargs),
                kind=kind,
                metadata=metadata or None,
                measure_response=measure_response,
            )

        wrapper._recorder = recorder  # type: ignore[attr-defined]
        return wrapper

    return decorator


__all__ = ["tracked"]
