"""Recorder – export document.

Schema (JSON, 2-space indent)::

    {
      "timestamp": "2024-01-01T12:00:00+00:00",
      "metrics": [
        {"id": ..., "name": ..., "kind": "api", "startTime": 12.5,
         "status": "success", "endTime": 40.1, "duration": 27.6,
         "url": "/api/users", "method": "GET", "responseSize": 512,
         "metadata": {...}},
        ...
      ],
      "stats": {"totalMetrics": ..., "apiMetrics": ..., "databaseMetrics": ...,
                "networkMetrics": ..., "customMetrics": ...,
                "avgApiDuration": ..., "avgDatabaseDuration": ...,
                "successRate": ...}
    }

``metrics`` is oldest first.  Optional metric fields that are unset are
omitted.  Field names are fixed; :func:`load_export` reads the same shape.
"""
from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from typing import Any

from perf_telemetry.kernel.errors import SerializationError
from perf_telemetry.recorder.models import Metric, OverallStats


@dataclasses.dataclass(frozen=True)
class MetricsExport:
    timestamp: datetime
    metrics: tuple[Metric, ...]
    stats: OverallStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "metrics": [m.to_dict() for m in self.metrics],
            "stats": self.stats.to_dict(),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def load_export(text: str | bytes) -> MetricsExport:
    """Parse a document produced by ``PerformanceRecorder.export_metrics``.

    Raises
    ------
    SerializationError
        When *text* is not valid JSON or does not follow the export schema.
    """
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise SerializationError("Metrics export is not valid JSON", cause=exc) from exc

    if not isinstance(data, dict):
        raise SerializationError("Metrics export must be a JSON object")

    try:
        return MetricsExport(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            metrics=tuple(Metric.from_dict(m) for m in data["metrics"]),
            stats=OverallStats.from_dict(data["stats"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SerializationError(
            f"Metrics export does not match the schema: {exc!r}",
            detail={"keys": sorted(data)},
            cause=exc,
        ) from exc


__all__ = ["MetricsExport", "load_export"]
