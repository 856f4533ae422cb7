"""Recorder – composition helper."""
from __future__ import annotations

from typing import Any, Sequence

from perf_telemetry.config.settings import EnvSettingsLoader, RecorderSettings, SettingsFactory, SettingsLoader
from perf_telemetry.kernel.time import Clock
from perf_telemetry.recorder.recorder import PerformanceRecorder


def create_recorder(
    settings: RecorderSettings | None = None,
    *,
    loaders: Sequence[SettingsLoader] | None = None,
    overrides: dict[str, Any] | None = None,
    clock: Clock | None = None,
) -> PerformanceRecorder:
    """Build a recorder for the host application to own and inject.

    Without explicit *settings*, values come from *loaders* (environment
    variables by default) merged with *overrides*.
    """
    if settings is None:
        settings = SettingsFactory.create(
            RecorderSettings,
            loaders=loaders if loaders is not None else [EnvSettingsLoader()],
            overrides=overrides,
        )
    return PerformanceRecorder.from_settings(settings, clock=clock)


__all__ = ["create_recorder"]
