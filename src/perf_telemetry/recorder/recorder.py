"""Recorder – PerformanceRecorder.

Keeps a bounded, insertion-ordered history of :class:`Metric` objects,
notifies listeners whenever a metric completes and computes aggregates on
demand.

Usage::

    recorder = PerformanceRecorder(capacity=500)

    users = await recorder.track_api_call(
        "Get Users", "/api/users", "GET", lambda: client.get_users()
    )

    metric_id = recorder.start_metric("Render Feed", MetricKind.CUSTOM)
    ...
    recorder.end_metric(metric_id)

    print(recorder.get_summary().avg_response_time)

Instrumentation never raises for misuse: ending an unknown, empty or evicted
id is a no-op, and listener failures are logged and swallowed.  Failures of
wrapped operations always reach the caller unchanged.
"""
from __future__ import annotations

import inspect
import threading
import uuid
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Mapping, TypeVar, Union

from perf_telemetry.config.settings import RecorderSettings
from perf_telemetry.config.validation import InvalidSettingValueError
from perf_telemetry.kernel.time import Clock, SystemClock
from perf_telemetry.observability.logging import get_logger
from perf_telemetry.recorder.export import MetricsExport
from perf_telemetry.recorder.listeners import ListenerRegistry, MetricListener, Subscription
from perf_telemetry.recorder.models import (
    Metric,
    MetricKind,
    MetricStats,
    MetricStatus,
    OverallStats,
    Summary,
)
from perf_telemetry.recorder.sizing import JsonResponseSizer, NullResponseSizer, ResponseSizer
from perf_telemetry.recorder.stats import (
    compute_metric_stats,
    compute_overall_stats,
    compute_stats_by_name,
    compute_summary,
)

T = TypeVar("T")

Operation = Union[Callable[[], Union[Awaitable[T], T]], Awaitable[T]]

DEFAULT_CAPACITY = 1000
DEFAULT_RECENT_COUNT = 50

log = get_logger(__name__)


def _failure_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class PerformanceRecorder:
    """In-process recorder for timed operations.

    Parameters
    ----------
    capacity:
        Maximum number of retained metrics.  Appending beyond it drops the
        oldest entry, pending or not.
    enabled:
        Initial state of the enabled flag.
    clock:
        Time source; :class:`~perf_telemetry.kernel.time.SystemClock` by default.
    sizer:
        Response size estimator used by the ``track_*`` helpers.
    recent_default:
        Number of entries :meth:`get_recent_metrics` returns when no count
        is given.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        *,
        enabled: bool = True,
        clock: Clock | None = None,
        sizer: ResponseSizer | None = None,
        recent_default: int = DEFAULT_RECENT_COUNT,
    ) -> None:
        if capacity < 1:
            raise InvalidSettingValueError("capacity", capacity, "must be at least 1")
        self._capacity = capacity
        self._enabled = enabled
        self._clock: Clock = clock or SystemClock()
        self._sizer: ResponseSizer = sizer or JsonResponseSizer()
        self._recent_default = recent_default
        self._history: OrderedDict[str, Metric] = OrderedDict()
        self._listeners = ListenerRegistry()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: RecorderSettings, *, clock: Clock | None = None) -> PerformanceRecorder:
        log.debug("performance_recorder_configured", **settings.to_dict())
        return cls(
            capacity=settings.capacity,
            enabled=settings.enabled,
            clock=clock,
            sizer=JsonResponseSizer() if settings.measure_response_size else NullResponseSizer(),
            recent_default=settings.recent_default,
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def __repr__(self) -> str:
        return (
            f"PerformanceRecorder(capacity={self._capacity!r}, enabled={self._enabled!r}, "
            f"retained={len(self)!r})"
        )

    # ------------------------------------------------------------------
    # Enabled flag
    # ------------------------------------------------------------------

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            changed = self._enabled != enabled
            self._enabled = enabled
        if changed:
            log.info("performance_recording_toggled", enabled=enabled)

    def is_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    # ------------------------------------------------------------------
    # Instrumentation
    # ------------------------------------------------------------------

    def start_metric(
        self,
        name: str,
        kind: MetricKind | str = MetricKind.API,
        metadata: Mapping[str, Any] | None = None,
        *,
        url: str | None = None,
        method: str | None = None,
        request_size: int | None = None,
    ) -> str:
        """Open a pending metric and return its id (``""`` when disabled)."""
        if not self.is_enabled():
            return ""

        try:
            metric_kind = MetricKind(kind)
        except ValueError:
            log.warning("unknown_metric_kind", kind=kind, metric_name=name)
            metric_kind = MetricKind.CUSTOM

        evicted: Metric | None = None
        with self._lock:
            if not self._enabled:
                return ""
            start = self._clock.monotonic_ms()
            metric = Metric(
                id=f"{name}_{int(start)}_{uuid.uuid4().hex[:12]}",
                name=name,
                kind=metric_kind,
                start_time=start,
                url=url,
                method=method,
                request_size=request_size,
                metadata=metadata,
            )
            self._history[metric.id] = metric
            if len(self._history) > self._capacity:
                _, evicted = self._history.popitem(last=False)

        if evicted is not None and not evicted.is_completed:
            log.debug("pending_metric_evicted", metric_id=evicted.id, metric_name=evicted.name)
        return metric.id

    def end_metric(
        self,
        metric_id: str,
        status: MetricStatus | str = MetricStatus.SUCCESS,
        error: str | None = None,
        response_size: int | None = None,
    ) -> None:
        """Complete a pending metric and notify listeners.

        Silently ignored when disabled, when *metric_id* is empty or no longer
        retained, or when the metric has already completed.
        """
        if not metric_id:
            return
        try:
            final_status = MetricStatus(status)
        except ValueError:
            final_status = None
        if final_status is None or not final_status.is_terminal:
            log.warning("invalid_metric_status_ignored", metric_id=metric_id, status=status)
            return

        with self._lock:
            if not self._enabled:
                return
            metric = self._history.get(metric_id)
            if metric is None or metric.is_completed:
                completed = None
            else:
                completed = metric.complete(
                    self._clock.monotonic_ms(), final_status, error, response_size
                )
                self._history[metric_id] = completed

        if completed is None:
            log.debug("end_metric_ignored", metric_id=metric_id)
            return
        self._notify(completed)

    def _notify(self, metric: Metric) -> None:
        for handle, listener in self._listeners.snapshot():
            # a listener removed by an earlier one in this loop must not fire
            if handle not in self._listeners:
                continue
            try:
                listener(metric)
            except Exception:  # noqa: BLE001
                log.exception(
                    "metric_listener_failed",
                    listener_handle=handle,
                    metric_id=metric.id,
                    metric_name=metric.name,
                )

    def _measure(self, result: Any) -> int | None:
        try:
            return self._sizer.measure(result)
        except Exception:  # noqa: BLE001
            log.debug("response_size_unavailable", sizer=type(self._sizer).__name__)
            return None

    async def track(
        self,
        name: str,
        operation: Operation[T],
        *,
        kind: MetricKind | str = MetricKind.CUSTOM,
        metadata: Mapping[str, Any] | None = None,
        url: str | None = None,
        method: str | None = None,
        measure_response: bool = False,
    ) -> T:
        """Run *operation* and record its duration and outcome.

        *operation* is a zero-argument callable (sync or async) or an
        awaitable.  Its result is returned and its exception re-raised
        exactly as they were produced.
        """
        if not self.is_enabled():
            return await _invoke(operation)

        metric_id = self.start_metric(name, kind, metadata, url=url, method=method)
        try:
            result = await _invoke(operation)
        except BaseException as exc:
            # cancellation and timeouts included: the metric must still terminate
            self.end_metric(metric_id, MetricStatus.ERROR, _failure_message(exc))
            raise
        size = self._measure(result) if measure_response else None
        self.end_metric(metric_id, MetricStatus.SUCCESS, response_size=size)
        return result

    async def track_api_call(self, name: str, url: str, method: str, operation: Operation[T]) -> T:
        return await self.track(
            name,
            operation,
            kind=MetricKind.API,
            metadata={"url": url, "method": method},
            url=url,
            method=method,
            measure_response=True,
        )

    async def track_network_request(self, name: str, url: str, method: str, operation: Operation[T]) -> T:
        return await self.track(
            name,
            operation,
            kind=MetricKind.NETWORK,
            metadata={"url": url, "method": method},
            url=url,
            method=method,
            measure_response=True,
        )

    async def track_database_query(self, name: str, operation: Operation[T]) -> T:
        return await self.track(name, operation, kind=MetricKind.DATABASE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_metrics(self) -> tuple[Metric, ...]:
        """Full history, oldest first."""
        with self._lock:
            return tuple(self._history.values())

    def get_metrics_by_type(self, kind: MetricKind | str) -> tuple[Metric, ...]:
        try:
            wanted = MetricKind(kind)
        except ValueError:
            return ()
        return tuple(m for m in self.get_metrics() if m.kind is wanted)

    def get_metrics_by_name(self, name: str) -> tuple[Metric, ...]:
        return tuple(m for m in self.get_metrics() if m.name == name)

    def get_recent_metrics(self, count: int | None = None) -> tuple[Metric, ...]:
        """The last *count* entries, newest first."""
        limit = self._recent_default if count is None else count
        if limit <= 0:
            return ()
        with self._lock:
            return tuple(reversed(self._history.values()))[:limit]

    def get_metric_stats(self, name: str) -> MetricStats:
        return compute_metric_stats(self.get_metrics_by_name(name))

    def get_stats_by_name(self) -> dict[str, MetricStats]:
        return compute_stats_by_name(self.get_metrics())

    def get_overall_stats(self) -> OverallStats:
        return compute_overall_stats(self.get_metrics())

    def get_summary(self) -> Summary:
        return compute_summary(self.get_metrics())

    def clear_metrics(self) -> None:
        with self._lock:
            dropped = len(self._history)
            self._history.clear()
        log.info("performance_metrics_cleared", dropped=dropped)

    # ------------------------------------------------------------------
    # Subscription / export
    # ------------------------------------------------------------------

    def add_listener(self, listener: MetricListener) -> Subscription:
        """Call *listener* with every metric completed from now on."""
        return Subscription(self._listeners, self._listeners.add(listener))

    def snapshot(self) -> MetricsExport:
        metrics = self.get_metrics()
        return MetricsExport(
            timestamp=self._clock.now(),
            metrics=metrics,
            stats=compute_overall_stats(metrics),
        )

    def export_metrics(self) -> str:
        """JSON dump of the history and overall stats (see :mod:`.export`)."""
        return self.snapshot().to_json()


async def _invoke(operation: Operation[T]) -> T:
    if inspect.isawaitable(operation):
        return await operation
    result = operation()
    if inspect.isawaitable(result):
        return await result
    return result


__all__ = ["DEFAULT_CAPACITY", "DEFAULT_RECENT_COUNT", "Operation", "PerformanceRecorder"]
