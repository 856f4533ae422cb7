"""Config – 12-factor settings and loaders."""

from perf_telemetry.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    RecorderSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from perf_telemetry.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RecorderSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
