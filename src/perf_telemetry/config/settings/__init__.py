"""Config settings – 12-factor env-based configuration."""
from perf_telemetry.config.settings.base import Settings
from perf_telemetry.config.settings.factory import SettingsFactory
from perf_telemetry.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from perf_telemetry.config.settings.recorder import RecorderSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "RecorderSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
