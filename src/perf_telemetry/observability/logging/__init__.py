"""Observability – structured logging helpers."""
from perf_telemetry.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from perf_telemetry.observability.logging.factory import JsonLoggerFactory
from perf_telemetry.observability.logging.processors import get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
