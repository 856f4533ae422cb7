"""Config settings – RecorderSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from perf_telemetry.config.settings.base import Settings
from perf_telemetry.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class RecorderSettings(Settings):
    """Tunables for :class:`~perf_telemetry.recorder.PerformanceRecorder`.

    Read from ``PERF_CAPACITY``, ``PERF_ENABLED``, ``PERF_RECENT_DEFAULT`` and
    ``PERF_MEASURE_RESPONSE_SIZE`` when loaded through
    :class:`~perf_telemetry.config.settings.loaders.EnvSettingsLoader`.
    """

    _prefix: ClassVar[str] = "PERF"

    capacity: int = 1000
    enabled: bool = True
    recent_default: int = 50
    measure_response_size: bool = True

    def _validate(self) -> None:
        if self.capacity < 1:
            raise InvalidSettingValueError("capacity", self.capacity, "must be at least 1")
        if self.recent_default < 1:
            raise InvalidSettingValueError("recent_default", self.recent_default, "must be at least 1")


__all__ = ["RecorderSettings"]
