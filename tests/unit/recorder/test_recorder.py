"""Unit tests for PerformanceRecorder bookkeeping: history, enablement, queries."""

from __future__ import annotations

import threading

import pytest

from perf_telemetry.config.validation import InvalidSettingValueError
from perf_telemetry.kernel.time import FrozenClock
from perf_telemetry.recorder import (
    Metric,
    MetricKind,
    MetricStatus,
    PerformanceRecorder,
)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def recorder(clock: FrozenClock) -> PerformanceRecorder:
    return PerformanceRecorder(clock=clock)


# ---------------------------------------------------------------------------
# start_metric / end_metric
# ---------------------------------------------------------------------------


class TestStartMetric:
    def test_returns_non_empty_id(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("Get Users")
        assert metric_id
        assert metric_id.startswith("Get Users_")

    def test_new_metric_is_pending(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("Get Users")
        (metric,) = recorder.get_metrics()
        assert metric.status is MetricStatus.PENDING
        assert metric.end_time is None
        assert metric.duration is None
        assert metric.kind is MetricKind.API

    def test_ids_are_unique_for_same_name_and_time(self, recorder: PerformanceRecorder) -> None:
        ids = {recorder.start_metric("same") for _ in range(200)}
        assert len(ids) == 200

    def test_kind_accepts_string(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("q", "database")
        assert recorder.get_metrics()[0].kind is MetricKind.DATABASE

    def test_unknown_kind_falls_back_to_custom(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("q", "gpu")
        assert recorder.get_metrics()[0].kind is MetricKind.CUSTOM

    def test_metadata_preserved(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("x", metadata={"page": 2, "filters": ["a"]})
        assert recorder.get_metrics()[0].metadata == {"page": 2, "filters": ("a",)}

    def test_metadata_is_copied_from_caller(self, recorder: PerformanceRecorder) -> None:
        meta = {"page": 1}
        recorder.start_metric("x", metadata=meta)
        meta["page"] = 99
        assert recorder.get_metrics()[0].metadata == {"page": 1}

    def test_nested_metadata_is_copied_from_caller(self, recorder: PerformanceRecorder) -> None:
        meta = {"headers": {"x": "orig"}, "ids": [1, 2]}
        recorder.start_metric("x", metadata=meta)
        meta["headers"]["x"] = "changed"
        meta["ids"].append(3)
        stored = recorder.get_metrics()[0].metadata
        assert stored["headers"]["x"] == "orig"
        assert stored["ids"] == (1, 2)

    def test_metric_is_hashable_with_metadata(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("x", metadata={"headers": {"x": "1"}})
        metric = recorder.get_metrics()[0]
        assert hash(metric) == hash(recorder.get_metrics()[0])
        assert metric in {metric}

    def test_empty_name_accepted(self, recorder: PerformanceRecorder) -> None:
        assert recorder.start_metric("") != ""
        assert len(recorder) == 1

    def test_start_time_uses_monotonic_clock(self, clock: FrozenClock, recorder: PerformanceRecorder) -> None:
        clock.advance(milliseconds=250)
        recorder.start_metric("x")
        assert recorder.get_metrics()[0].start_time == pytest.approx(250.0)


class TestEndMetric:
    def test_completes_with_duration(self, clock: FrozenClock, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        clock.advance(milliseconds=40)
        recorder.end_metric(metric_id)
        (metric,) = recorder.get_metrics()
        assert metric.status is MetricStatus.SUCCESS
        assert metric.duration == pytest.approx(40.0)
        assert metric.end_time == pytest.approx(metric.start_time + 40.0)

    def test_error_status_records_message(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        recorder.end_metric(metric_id, "error", "boom")
        metric = recorder.get_metrics()[0]
        assert metric.status is MetricStatus.ERROR
        assert metric.error == "boom"

    def test_error_message_dropped_on_success(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        recorder.end_metric(metric_id, MetricStatus.SUCCESS, "ignored")
        assert recorder.get_metrics()[0].error is None

    def test_response_size_recorded(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        recorder.end_metric(metric_id, "success", None, 120)
        assert recorder.get_metrics()[0].response_size == 120

    def test_unknown_id_is_noop(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("X")
        before = recorder.get_metrics()
        recorder.end_metric("nonexistent-id")
        assert recorder.get_metrics() == before

    def test_empty_id_is_noop(self, recorder: PerformanceRecorder) -> None:
        recorder.end_metric("")
        assert recorder.get_metrics() == ()

    def test_invalid_status_is_noop(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        recorder.end_metric(metric_id, "exploded")
        recorder.end_metric(metric_id, "pending")
        assert recorder.get_metrics()[0].status is MetricStatus.PENDING

    def test_second_end_does_not_overwrite(self, clock: FrozenClock, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        clock.advance(milliseconds=5)
        recorder.end_metric(metric_id)
        clock.advance(milliseconds=100)
        recorder.end_metric(metric_id, "error", "late")
        metric = recorder.get_metrics()[0]
        assert metric.status is MetricStatus.SUCCESS
        assert metric.duration == pytest.approx(5.0)

    def test_completion_keeps_history_position(self, recorder: PerformanceRecorder) -> None:
        first = recorder.start_metric("A")
        recorder.start_metric("B")
        recorder.end_metric(first)
        assert [m.name for m in recorder.get_metrics()] == ["A", "B"]

    def test_scenario_single_success(self, clock: FrozenClock, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        clock.advance(milliseconds=3)
        recorder.end_metric(metric_id, "success", None, 120)
        stats = recorder.get_metric_stats("X")
        metric = recorder.get_metrics()[0]
        assert stats.count == 1
        assert stats.success_count == 1
        assert stats.error_count == 0
        assert stats.avg_duration > 0
        assert stats.min_duration == stats.max_duration == metric.duration


# ---------------------------------------------------------------------------
# History bound
# ---------------------------------------------------------------------------


class TestHistoryCapacity:
    def test_invalid_capacity_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            PerformanceRecorder(capacity=0)

    def test_default_capacity(self) -> None:
        assert PerformanceRecorder().capacity == 1000

    def test_fifo_eviction(self) -> None:
        recorder = PerformanceRecorder(capacity=3)
        for name in "ABCD":
            recorder.start_metric(name)
        assert [m.name for m in recorder.get_metrics()] == ["B", "C", "D"]

    def test_eviction_ignores_status(self) -> None:
        recorder = PerformanceRecorder(capacity=2)
        pending = recorder.start_metric("A")
        done = recorder.start_metric("B")
        recorder.end_metric(done)
        recorder.start_metric("C")
        assert [m.name for m in recorder.get_metrics()] == ["B", "C"]
        # ending the evicted entry finds nothing
        recorder.end_metric(pending)
        assert len(recorder) == 2

    def test_never_exceeds_capacity(self) -> None:
        recorder = PerformanceRecorder(capacity=10)
        for i in range(57):
            recorder.start_metric(f"m{i}")
            assert len(recorder) <= 10
        assert [m.name for m in recorder.get_metrics()] == [f"m{i}" for i in range(47, 57)]

    def test_concurrent_starts_respect_capacity(self) -> None:
        recorder = PerformanceRecorder(capacity=50)
        ids: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(100):
                metric_id = recorder.start_metric("t")
                recorder.end_metric(metric_id)
                with lock:
                    ids.append(metric_id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ids) == 800
        assert len(set(ids)) == 800
        assert len(recorder) == 50


# ---------------------------------------------------------------------------
# Enabled flag
# ---------------------------------------------------------------------------


class TestEnabledFlag:
    def test_enabled_by_default(self, recorder: PerformanceRecorder) -> None:
        assert recorder.is_enabled() is True

    def test_disabled_start_returns_empty_id(self, recorder: PerformanceRecorder) -> None:
        recorder.set_enabled(False)
        assert recorder.start_metric("X") == ""
        assert recorder.get_metrics() == ()

    def test_disabled_end_does_nothing(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        recorder.set_enabled(False)
        recorder.end_metric(metric_id)
        assert recorder.get_metrics()[0].status is MetricStatus.PENDING

    def test_toggle_does_not_touch_history(self, recorder: PerformanceRecorder) -> None:
        recorder.end_metric(recorder.start_metric("X"))
        recorder.set_enabled(False)
        recorder.set_enabled(True)
        assert len(recorder) == 1
        assert recorder.get_metrics()[0].status is MetricStatus.SUCCESS

    def test_constructed_disabled(self) -> None:
        recorder = PerformanceRecorder(enabled=False)
        assert recorder.is_enabled() is False
        assert recorder.start_metric("X") == ""


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_metrics_is_snapshot(self, recorder: PerformanceRecorder) -> None:
        metric_id = recorder.start_metric("X")
        snapshot = recorder.get_metrics()
        recorder.end_metric(metric_id)
        recorder.start_metric("Y")
        assert len(snapshot) == 1
        assert snapshot[0].status is MetricStatus.PENDING

    def test_returned_metrics_are_frozen(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("X")
        metric = recorder.get_metrics()[0]
        with pytest.raises((AttributeError, TypeError)):
            metric.name = "Y"  # type: ignore[misc]

    def test_filter_by_type_and_name(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("a", "api")
        recorder.start_metric("q", "database")
        recorder.start_metric("a", "database")
        assert [m.name for m in recorder.get_metrics_by_type("database")] == ["q", "a"]
        assert [m.kind for m in recorder.get_metrics_by_name("a")] == [MetricKind.API, MetricKind.DATABASE]
        assert recorder.get_metrics_by_type("nonsense") == ()

    def test_recent_newest_first(self, recorder: PerformanceRecorder) -> None:
        for name in "ABCDE":
            recorder.start_metric(name)
        assert [m.name for m in recorder.get_recent_metrics(3)] == ["E", "D", "C"]

    def test_recent_larger_than_history_is_reverse(self, recorder: PerformanceRecorder) -> None:
        for name in "ABC":
            recorder.start_metric(name)
        assert recorder.get_recent_metrics(10) == tuple(reversed(recorder.get_metrics()))

    def test_recent_default_count(self) -> None:
        recorder = PerformanceRecorder(recent_default=2)
        for name in "ABC":
            recorder.start_metric(name)
        assert [m.name for m in recorder.get_recent_metrics()] == ["C", "B"]

    def test_recent_zero(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("A")
        assert recorder.get_recent_metrics(0) == ()

    def test_recent_includes_pending(self, recorder: PerformanceRecorder) -> None:
        recorder.start_metric("A")
        (metric,) = recorder.get_recent_metrics(5)
        assert metric.status is MetricStatus.PENDING
        assert metric.duration is None

    def test_clear_metrics(self, recorder: PerformanceRecorder) -> None:
        calls: list[Metric] = []
        recorder.add_listener(calls.append)
        stale = recorder.start_metric("A")
        recorder.clear_metrics()
        assert recorder.get_metrics() == ()
        assert recorder.is_enabled() is True
        assert recorder.listener_count == 1
        recorder.end_metric(stale)
        assert calls == []
