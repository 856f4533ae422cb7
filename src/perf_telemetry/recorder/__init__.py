"""Recorder – in-process performance telemetry."""
from perf_telemetry.recorder.models import (
    Metric,
    MetricKind,
    MetricStats,
    MetricStatus,
    OverallStats,
    Summary,
)
from perf_telemetry.recorder.listeners import ListenerRegistry, MetricListener, Subscription
from perf_telemetry.recorder.sizing import JsonResponseSizer, NullResponseSizer, ResponseSizer
from perf_telemetry.recorder.export import MetricsExport, load_export
from perf_telemetry.recorder.recorder import DEFAULT_CAPACITY, DEFAULT_RECENT_COUNT, PerformanceRecorder
from perf_telemetry.recorder.decorators import tracked
from perf_telemetry.recorder.factory import create_recorder
from perf_telemetry.recorder.formatting import format_duration, format_rate

__all__ = [
    "DEFAULT_CAPACITY",
    "DEFAULT_RECENT_COUNT",
    "JsonResponseSizer",
    "ListenerRegistry",
    "Metric",
    "MetricKind",
    "MetricListener",
    "MetricStats",
    "MetricStatus",
    "MetricsExport",
    "NullResponseSizer",
    "OverallStats",
    "PerformanceRecorder",
    "ResponseSizer",
    "Subscription",
    "Summary",
    "create_recorder",
    "format_duration",
    "format_rate",
    "load_export",
    "tracked",
]
