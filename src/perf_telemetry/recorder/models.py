"""Recorder – Metric and aggregate value objects.

Every object here is frozen: the recorder swaps in a new :class:`Metric` when a
measurement completes, so snapshots handed to callers never change underneath
them.

The ``to_dict`` methods produce the export schema (camelCase keys); absent
optional values are omitted rather than written as ``null``.
"""
from __future__ import annotations

import copy
import dataclasses
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class MetricKind(str, Enum):
    API = "api"
    DATABASE = "database"
    NETWORK = "network"
    CUSTOM = "custom"


class MetricStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not MetricStatus.PENDING


def _freeze_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool, bytes)):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze_value(v) for v in value)
    try:
        return copy.deepcopy(value)
    except Exception:  # noqa: BLE001
        # uncopyable leaves (locks, sockets) are kept by reference
        return value


def _freeze(metadata: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Deep, read-only copy: nested mappings become proxies, sequences tuples."""
    if metadata is None:
        return None
    return _freeze_value(metadata)


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    return str(value)


@dataclasses.dataclass(frozen=True)
class Metric:
    """One observation of a timed, named operation.

    ``start_time``/``end_time`` are monotonic milliseconds; they are only
    meaningful relative to each other.
    """

    id: str
    name: str
    kind: MetricKind
    start_time: float
    status: MetricStatus = MetricStatus.PENDING
    end_time: float | None = None
    duration: float | None = None
    error: str | None = None
    url: str | None = None
    method: str | None = None
    request_size: int | None = None
    response_size: int | None = None
    metadata: Mapping[str, Any] | None = dataclasses.field(default=None, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @property
    def is_completed(self) -> bool:
        return self.duration is not None

    def complete(
        self,
        end_time: float,
        status: MetricStatus,
        error: str | None = None,
        response_size: int | None = None,
    ) -> Metric:
        """Return the terminal copy of this metric."""
        return dataclasses.replace(
            self,
            end_time=end_time,
            duration=max(0.0, end_time - self.start_time),
            status=status,
            error=error if status is MetricStatus.ERROR else None,
            response_size=response_size if response_size is not None else self.response_size,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "startTime": self.start_time,
            "status": self.status.value,
        }
        optional = {
            "endTime": self.end_time,
            "duration": self.duration,
            "error": self.error,
            "url": self.url,
            "method": self.method,
            "requestSize": self.request_size,
            "responseSize": self.response_size,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        if self.metadata is not None:
            payload["metadata"] = _jsonable(self.metadata)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metric:
        return cls(
            id=data["id"],
            name=data["name"],
            kind=MetricKind(data["kind"]),
            start_time=float(data["startTime"]),
            status=MetricStatus(data["status"]),
            end_time=data.get("endTime"),
            duration=data.get("duration"),
            error=data.get("error"),
            url=data.get("url"),
            method=data.get("method"),
            request_size=data.get("requestSize"),
            response_size=data.get("responseSize"),
            metadata=data.get("metadata"),
        )


@dataclasses.dataclass(frozen=True)
class MetricStats:
    """Aggregates over the completed metrics sharing one name."""

    count: int = 0
    avg_duration: float = 0.0
    min_duration: float = 0.0
    max_duration: float = 0.0
    success_count: int = 0
    error_count: int = 0
    total_duration: float = 0.0

    @property
    def success_rate(self) -> float:
        """Percentage of successful calls, ``0.0`` when there are none."""
        if self.count == 0:
            return 0.0
        return self.success_count / self.count * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "avgDuration": self.avg_duration,
            "minDuration": self.min_duration,
            "maxDuration": self.max_duration,
            "successCount": self.success_count,
            "errorCount": self.error_count,
            "totalDuration": self.total_duration,
        }


@dataclasses.dataclass(frozen=True)
class OverallStats:
    total_metrics: int = 0
    api_metrics: int = 0
    database_metrics: int = 0
    network_metrics: int = 0
    custom_metrics: int = 0
    avg_api_duration: float = 0.0
    avg_database_duration: float = 0.0
    success_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMetrics": self.total_metrics,
            "apiMetrics": self.api_metrics,
            "databaseMetrics": self.database_metrics,
            "networkMetrics": self.network_metrics,
            "customMetrics": self.custom_metrics,
            "avgApiDuration": self.avg_api_duration,
            "avgDatabaseDuration": self.avg_database_duration,
            "successRate": self.success_rate,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OverallStats:
        return cls(
            total_metrics=int(data["totalMetrics"]),
            api_metrics=int(data["apiMetrics"]),
            database_metrics=int(data["databaseMetrics"]),
            network_metrics=int(data["networkMetrics"]),
            custom_metrics=int(data.get("customMetrics", 0)),
            avg_api_duration=float(data["avgApiDuration"]),
            avg_database_duration=float(data["avgDatabaseDuration"]),
            success_rate=float(data["successRate"]),
        )


@dataclasses.dataclass(frozen=True)
class Summary:
    total_calls: int = 0
    avg_response_time: float = 0.0
    slowest_call: Metric | None = None
    fastest_call: Metric | None = None
    error_rate: float = 0.0
    calls_by_type: Mapping[str, int] = dataclasses.field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "calls_by_type", MappingProxyType(dict(self.calls_by_type)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCalls": self.total_calls,
            "avgResponseTime": self.avg_response_time,
            "slowestCall": self.slowest_call.to_dict() if self.slowest_call else None,
            "fastestCall": self.fastest_call.to_dict() if self.fastest_call else None,
            "errorRate": self.error_rate,
            "callsByType": dict(self.calls_by_type),
        }


__all__ = ["Metric", "MetricKind", "MetricStats", "MetricStatus", "OverallStats", "Summary"]
