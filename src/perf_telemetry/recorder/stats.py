"""Recorder – aggregate computations over a history snapshot.

All functions are pure: they receive an already-copied sequence of metrics,
so the recorder can run them outside its lock.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from perf_telemetry.recorder.models import (
    Metric,
    MetricKind,
    MetricStats,
    MetricStatus,
    OverallStats,
    Summary,
)


def completed(metrics: Iterable[Metric]) -> list[Metric]:
    return [m for m in metrics if m.duration is not None]


def _average(metrics: Sequence[Metric]) -> float:
    if not metrics:
        return 0.0
    return sum(m.duration or 0.0 for m in metrics) / len(metrics)


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def compute_metric_stats(metrics: Iterable[Metric]) -> MetricStats:
    """Stats for a group of metrics; pending entries are ignored."""
    done = completed(metrics)
    if not done:
        return MetricStats()

    durations = [m.duration for m in done if m.duration is not None]
    total = sum(durations)
    return MetricStats(
        count=len(done),
        avg_duration=total / len(done),
        min_duration=min(durations),
        max_duration=max(durations),
        success_count=sum(1 for m in done if m.status is MetricStatus.SUCCESS),
        error_count=sum(1 for m in done if m.status is MetricStatus.ERROR),
        total_duration=total,
    )


def compute_stats_by_name(metrics: Iterable[Metric]) -> dict[str, MetricStats]:
    """Per-name stats for every name with at least one completed entry.

    Names keep the order in which they first appear in *metrics*.
    """
    groups: dict[str, list[Metric]] = {}
    for metric in metrics:
        groups.setdefault(metric.name, []).append(metric)
    return {
        name: compute_metric_stats(group)
        for name, group in groups.items()
        if any(m.is_completed for m in group)
    }


def compute_overall_stats(metrics: Sequence[Metric]) -> OverallStats:
    done = completed(metrics)
    by_kind: dict[MetricKind, list[Metric]] = {kind: [] for kind in MetricKind}
    for metric in done:
        by_kind[metric.kind].append(metric)
    successes = sum(1 for m in done if m.status is MetricStatus.SUCCESS)

    return OverallStats(
        total_metrics=len(metrics),
        api_metrics=len(by_kind[MetricKind.API]),
        database_metrics=len(by_kind[MetricKind.DATABASE]),
        network_metrics=len(by_kind[MetricKind.NETWORK]),
        custom_metrics=len(by_kind[MetricKind.CUSTOM]),
        avg_api_duration=_average(by_kind[MetricKind.API]),
        avg_database_duration=_average(by_kind[MetricKind.DATABASE]),
        success_rate=_percentage(successes, len(done)),
    )


def compute_summary(metrics: Iterable[Metric]) -> Summary:
    done = completed(metrics)
    if not done:
        return Summary()

    slowest = fastest = done[0]
    for metric in done[1:]:
        # strict comparisons: the earliest entry wins a tie
        if (metric.duration or 0.0) > (slowest.duration or 0.0):
            slowest = metric
        if (metric.duration or 0.0) < (fastest.duration or 0.0):
            fastest = metric

    errors = sum(1 for m in done if m.status is MetricStatus.ERROR)
    return Summary(
        total_calls=len(done),
        avg_response_time=_average(done),
        slowest_call=slowest,
        fastest_call=fastest,
        error_rate=_percentage(errors, len(done)),
        calls_by_type=dict(Counter(m.kind.value for m in done)),
    )


__all__ = [
    "completed",
    "compute_metric_stats",
    "compute_overall_stats",
    "compute_stats_by_name",
    "compute_summary",
]
