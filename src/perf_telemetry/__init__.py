"""
perf_telemetry – in-process performance telemetry recorder.

Import path convention::

    from perf_telemetry.recorder import PerformanceRecorder, MetricKind
    from perf_telemetry.config import RecorderSettings
    from perf_telemetry.observability.logging import JsonLoggerFactory
"""

from perf_telemetry.recorder import (
    Metric,
    MetricKind,
    MetricStatus,
    PerformanceRecorder,
    create_recorder,
    load_export,
    tracked,
)

__version__ = "0.1.0"
__all__ = [
    "Metric",
    "MetricKind",
    "MetricStatus",
    "PerformanceRecorder",
    "__version__",
    "create_recorder",
    "load_export",
    "tracked",
]
